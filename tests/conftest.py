"""
Shared fixtures: an in-memory app per test and a manually fired timer
so debounced saves run exactly when a test says so.
"""

import pytest

from app import create_app
from models import db
from services import KeyValueStore, RowStore, IngredientCache, SettingsStore


class FakeTimer:
    """Stands in for threading.Timer; runs only when fire() is called."""

    def __init__(self, delay, fn, args=()):
        self.delay = delay
        self.fn = fn
        self.args = args
        self.daemon = False
        self.started = False
        self.cancelled = False
        self.fired = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if self.started and not self.cancelled and not self.fired:
            self.fired = True
            self.fn(*self.args)


class FakeTimerFactory:

    def __init__(self):
        self.timers = []

    def __call__(self, delay, fn, args=()):
        timer = FakeTimer(delay, fn, args)
        self.timers.append(timer)
        return timer

    @property
    def live(self):
        return [t for t in self.timers if t.started and not t.cancelled and not t.fired]

    def fire_all(self):
        for timer in list(self.timers):
            timer.fire()


@pytest.fixture
def timers():
    return FakeTimerFactory()


@pytest.fixture
def app(timers):
    app = create_app('testing', timer_factory=timers)
    with app.app_context():
        yield app
        db.session.remove()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def session(app):
    return app.extensions['recipe_session']


@pytest.fixture
def kv(app):
    return KeyValueStore()


@pytest.fixture
def row_store(kv):
    return RowStore(kv)


@pytest.fixture
def cache(kv):
    return IngredientCache(kv)


@pytest.fixture
def settings(kv):
    return SettingsStore(kv, default_margin_pct=30.0)


@pytest.fixture
def flour():
    return {'name': 'Flour', 'cost': 1290.0, 'amount': 1000.0, 'recipeAmount': 300.0}
