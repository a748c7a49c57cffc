"""
Tests for the web viewer: FluereEngine and the Socket.IO events.
"""

import pytest

from backend import app as app_module
from backend.fluere_engine import FluereEngine
from fluere import FluereError, ViewState


@pytest.fixture
def engine(tmp_path):
    return FluereEngine(width=20, height=14, num_knots=2, seed=77,
                        screenshot_dir=str(tmp_path))


@pytest.fixture
def client(tmp_path):
    flask_app = app_module.create_app('testing')
    flask_app.config['FLUERE_SCREENSHOT_DIR'] = str(tmp_path)
    client = app_module.socketio.test_client(flask_app)
    client.get_received()
    yield client
    client.disconnect()
    app_module.is_running = False


def _events(client, name):
    return [msg['args'][0] for msg in client.get_received() if msg['name'] == name]


def _to_normal(engine, limit=100):
    for _ in range(limit):
        if engine.animator.state is ViewState.NORMAL:
            return
        engine.render_frame()
    pytest.fail("animation never reached the normal state")


class TestEngine:
    """FluereEngine without the socket layer."""

    def test_render_frame(self, engine):
        image, error = engine.render_frame()
        assert error is None
        assert image.startswith("data:image/jpeg;base64,")
        assert engine.frame_count == 1

    def test_screenshot_needs_a_drawing(self, engine):
        with pytest.raises(FluereError):
            engine.save_screenshot()

    def test_screenshot_numbering(self, engine, tmp_path):
        engine.render_frame()
        first = engine.save_screenshot()
        second = engine.save_screenshot()
        assert first.endswith("Fluere 1.png")
        assert second.endswith("Fluere 2.png")
        assert (tmp_path / "Fluere 2.png").exists()

    def test_new_palette_only_when_normal(self, engine):
        engine.render_frame()
        assert engine.new_palette() is None
        _to_normal(engine)
        assert engine.new_palette() in [p.name for p in engine.palettes]

    def test_new_drawing(self, engine):
        assert engine.new_drawing() is False
        engine.render_frame()
        assert engine.new_drawing() is True
        assert engine.animator.state is ViewState.CALC

    def test_status(self, engine):
        status = engine.get_status()
        assert status['state'] == 'calc'
        assert status['styles'] is None
        engine.render_frame()
        status = engine.get_status()
        assert status['state'] == 'fade_in'
        assert len(status['styles']) == 2
        assert status['resolution'] == [20, 14]
        assert status['num_knots'] == 2

    def test_palettes_listing(self, engine):
        palettes = engine.get_palettes()
        assert palettes
        assert all(c.startswith("0x") for c in palettes[0]['colors'])


class TestSocketEvents:
    """Socket.IO surface."""

    def test_connect_status(self):
        flask_app = app_module.create_app('testing')
        client = app_module.socketio.test_client(flask_app)
        statuses = _events(client, 'status')
        assert statuses[0]['type'] == 'success'
        client.disconnect()

    def test_index_page(self):
        flask_app = app_module.create_app('testing')
        response = flask_app.test_client().get('/')
        assert response.status_code == 200
        assert b'Fluere' in response.data

    def test_set_knots(self, client):
        client.emit('set_knots', {'value': 99})
        status = _events(client, 'status')[-1]
        assert status['type'] == 'success'
        assert app_module.get_engine().num_knots == 50

    def test_set_knots_rejects_text(self, client):
        client.emit('set_knots', {'value': 'many'})
        assert _events(client, 'status')[-1]['type'] == 'error'

    def test_engine_uses_testing_config(self, client):
        client.emit('get_status')
        status = _events(client, 'engine_status')[-1]
        assert status['resolution'] == [32, 24]

    def test_new_palette_before_drawing(self, client):
        client.emit('new_palette')
        assert _events(client, 'status')[-1]['type'] == 'info'

    def test_screenshot_before_drawing(self, client):
        client.emit('save_screenshot')
        assert _events(client, 'status')[-1]['type'] == 'error'

    def test_get_palettes(self, client):
        client.emit('get_palettes')
        palettes = _events(client, 'palettes_list')[-1]['palettes']
        assert len(palettes) == len(app_module.get_engine().palettes)

    def test_stop_rendering(self, client):
        client.emit('stop_rendering')
        assert _events(client, 'status')[-1]['type'] == 'info'
        assert app_module.is_running is False
