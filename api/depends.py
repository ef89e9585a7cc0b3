from fastapi import Depends, HTTPException, Request, status
from services.cache import get_cache_client
from services.pipeline import ChartPipeline
from services.errors import ChartError, EmptyVisibilitySetError, SessionNotFoundError
from auth.security import get_current_client

# --- DEPENDENCY INJECTION SETUP ---

def get_pipeline(request: Request) -> ChartPipeline:
    """The pipeline built for the dataset loaded at startup."""
    return request.app.state.pipeline


CLIENT_AUTH = Depends(get_current_client)
CACHE_CLIENT = Depends(get_cache_client)
PIPELINE = Depends(get_pipeline)


# --- Domain error translation ---
_STATUS_BY_ERROR = {
    SessionNotFoundError: status.HTTP_404_NOT_FOUND,
    EmptyVisibilitySetError: status.HTTP_409_CONFLICT,
}

def http_error(e: ChartError) -> HTTPException:
    """Map a chart domain error onto the HTTP status the routes answer with."""
    status_code = _STATUS_BY_ERROR.get(type(e), status.HTTP_400_BAD_REQUEST)
    return HTTPException(status_code=status_code, detail=str(e))
