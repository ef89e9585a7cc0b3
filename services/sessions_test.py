import os
os.environ.setdefault("VALKEY_HOST", "")
os.environ.setdefault("LOG_FILE", "")

import json
import unittest
from unittest.mock import MagicMock
from pydantic import ValidationError
from models.chart import ViewMode
from models.dataset import Dataset
from models.sessions import ChartSession, LineStyle, Theme
from services.cache import CacheClient, get_mock_cache_client
from services.errors import (
    EmptyVisibilitySetError,
    InvalidZoomLevelError,
    SessionNotFoundError,
    UnknownVariationError,
)
from services import sessions
import logging

# Set up logging to capture output during tests
logging.basicConfig(level=logging.INFO)


DATASET = Dataset.model_validate({
    "variations": [
        {"name": "Original"},
        {"id": 1, "name": "Red Button"},
        {"id": 2, "name": "Blue Button"},
    ],
    "days": [],
})


class TestChartSessionService(unittest.TestCase):

    def setUp(self):
        self.cache = get_mock_cache_client()
        self.session = sessions.create_session(self.cache, DATASET)

    # --- Lifecycle ---

    def test_create_session_stores_defaults(self):
        """A new session shows every variation, daily, at 100% zoom."""
        stored = self.cache.get_session(self.session.id)

        self.assertEqual(stored, self.session)
        self.assertEqual(stored.visible, ["Original", "Red Button", "Blue Button"])
        self.assertEqual(stored.view_mode, ViewMode.DAY)
        self.assertEqual(stored.zoom_level, 100)
        self.assertEqual(stored.line_style, LineStyle.MONOTONE)
        self.assertEqual(stored.theme, Theme.LIGHT)

    def test_get_missing_session_raises(self):
        with self.assertRaises(SessionNotFoundError):
            sessions.get_session(self.cache, "missing")

    def test_save_session_writes_through_backend_with_ttl(self):
        backend = MagicMock()
        cache = CacheClient(backend=backend, session_ttl=60)

        sessions.save_session(cache, self.session)

        key, value = backend.set.call_args.args
        self.assertEqual(key, f"chart:session:{self.session.id}")
        self.assertEqual(ChartSession.model_validate_json(value), self.session)
        self.assertEqual(backend.set.call_args.kwargs, {"ex": 60})

    def test_stored_session_with_no_visible_variations_is_rejected(self):
        """A cached payload with an empty visible list fails validation on read."""
        payload = self.session.model_dump(mode="json")
        payload["visible"] = []
        self.cache.backend.set(f"chart:session:{self.session.id}", json.dumps(payload), ex=60)

        with self.assertRaises(ValidationError):
            sessions.get_session(self.cache, self.session.id)
        with self.assertRaises(ValidationError):
            ChartSession(id="s1", visible=[])

    # --- Visibility ---

    def test_toggle_hides_and_restores_in_dataset_order(self):
        hidden = sessions.toggle_variation(self.session, DATASET, "Original")
        self.assertEqual(hidden.visible, ["Red Button", "Blue Button"])

        restored = sessions.toggle_variation(hidden, DATASET, "Original")
        self.assertEqual(restored.visible, ["Original", "Red Button", "Blue Button"])

        # the input session is never modified
        self.assertEqual(self.session.visible, ["Original", "Red Button", "Blue Button"])

    def test_visible_set_never_becomes_empty(self):
        session = self.session
        toggles = ["Original", "Red Button", "Blue Button", "Blue Button", "Original", "Red Button"]
        rejected = 0

        for name in toggles:
            try:
                session = sessions.toggle_variation(session, DATASET, name)
            except EmptyVisibilitySetError:
                rejected += 1
            self.assertTrue(session.visible)

        self.assertEqual(rejected, 2)
        self.assertEqual(session.visible, ["Original", "Red Button", "Blue Button"])

    def test_toggle_unknown_variation_raises(self):
        with self.assertRaises(UnknownVariationError):
            sessions.toggle_variation(self.session, DATASET, "Green Button")

    # --- Zoom ---

    def test_set_zoom_accepts_only_steps(self):
        self.assertEqual(sessions.set_zoom_level(self.session, 50).zoom_level, 50)
        for zoom_level in (0, 25, 60, 225):
            with self.assertRaises(InvalidZoomLevelError):
                sessions.set_zoom_level(self.session, zoom_level)

    def test_zoom_in_and_out_are_clamped(self):
        session = self.session
        for _ in range(6):
            session = sessions.zoom_in(session)
        self.assertEqual(session.zoom_level, 200)

        for _ in range(8):
            session = sessions.zoom_out(session)
        self.assertEqual(session.zoom_level, 50)

        self.assertEqual(sessions.reset_zoom(session).zoom_level, 100)

    # --- Display options ---

    def test_view_mode_line_style_and_theme(self):
        session = sessions.set_view_mode(self.session, "week")
        session = sessions.set_line_style(session, LineStyle.STEP)
        session = sessions.set_theme(session, "dark")

        self.assertEqual(session.view_mode, ViewMode.WEEK)
        self.assertEqual(session.line_style, LineStyle.STEP)
        self.assertEqual(session.theme, Theme.DARK)


if __name__ == '__main__':
    unittest.main()
