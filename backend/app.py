"""
Flask app for the Fluere viewer
"""

import logging
import os
import sys
import time
import threading
from flask import Flask, render_template, request
from flask_socketio import SocketIO, emit

from backend.fluere_engine import FluereEngine
from fluere.animation import FPS
from fluere.errors import FluereError
from config import config

logger = logging.getLogger(__name__)

app = Flask(__name__, template_folder='templates')

# Configure app based on environment
config_name = os.environ.get('FLASK_ENV', 'development')
app.config.from_object(config[config_name])

socketio = SocketIO(app, cors_allowed_origins="*", async_mode='threading')

# Global engine instance, created on first use so tests can swap the config
engine = None
is_running = False
render_thread = None


def configure_logging(level):
    """Send fluere and viewer logs to stdout"""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S"
    ))
    for name in ('fluere', 'backend'):
        log = logging.getLogger(name)
        log.setLevel(level)
        if not log.handlers:
            log.addHandler(handler)


def get_engine():
    global engine
    if engine is None:
        engine = FluereEngine(
            width=app.config['FLUERE_WIDTH'],
            height=app.config['FLUERE_HEIGHT'],
            num_knots=app.config['FLUERE_NUM_KNOTS'],
            palette_file=app.config['FLUERE_PALETTE_FILE'],
            seed=app.config['FLUERE_SEED'],
            screenshot_dir=app.config['FLUERE_SCREENSHOT_DIR'],
        )
    return engine


@app.route('/')
def index():
    """Serve the main interface"""
    return render_template('index.html')

@socketio.on('connect')
def handle_connect():
    """Handle client connection"""
    logger.info("Client connected: %s", request.sid)
    emit('status', {'message': 'Connected to Fluere viewer', 'type': 'success'})

@socketio.on('disconnect')
def handle_disconnect():
    """Handle client disconnection"""
    logger.info("Client disconnected: %s", request.sid)

@socketio.on('set_knots')
def handle_set_knots(data):
    """Set the knot count used by the next drawing"""
    try:
        value = data.get('value')
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            emit('status', {'message': 'Knot count must be a number', 'type': 'error'})
            return

        knots = get_engine().set_num_knots(value)
        logger.info("Knots set to %d", knots)
        emit('status', {'message': f'Knots set to {knots}', 'type': 'success'})

    except Exception as e:
        emit('status', {'message': f'Error setting knots: {str(e)}', 'type': 'error'})

@socketio.on('new_drawing')
def handle_new_drawing():
    """Start over with a new drawing"""
    try:
        if get_engine().new_drawing():
            emit('status', {'message': 'Computing a new drawing', 'type': 'success'})
        else:
            emit('status', {'message': 'A drawing is already on its way', 'type': 'info'})

    except Exception as e:
        emit('status', {'message': f'Error starting a new drawing: {str(e)}', 'type': 'error'})

@socketio.on('new_palette')
def handle_new_palette():
    """Give the current drawing a new color table"""
    try:
        name = get_engine().new_palette()
        if name:
            emit('status', {'message': f'Palette: {name}', 'type': 'success'})
        else:
            emit('status', {'message': 'Wait for the drawing to finish fading in', 'type': 'info'})

    except Exception as e:
        emit('status', {'message': f'Error changing palette: {str(e)}', 'type': 'error'})

@socketio.on('save_screenshot')
def handle_save_screenshot():
    """Save the current frame as PNG"""
    try:
        path = get_engine().save_screenshot()
        emit('status', {'message': f'Saved {path}', 'type': 'success'})

    except FluereError as e:
        emit('status', {'message': str(e), 'type': 'error'})
    except OSError as e:
        emit('status', {'message': f'Error saving screenshot: {str(e)}', 'type': 'error'})

@socketio.on('start_rendering')
def handle_start_rendering():
    """Start the rendering loop"""
    global is_running, render_thread

    if is_running:
        emit('status', {'message': 'Already running', 'type': 'info'})
        return

    is_running = True
    render_thread = threading.Thread(target=render_loop)
    render_thread.daemon = True
    render_thread.start()

    emit('status', {'message': 'Rendering started', 'type': 'success'})

@socketio.on('stop_rendering')
def handle_stop_rendering():
    """Stop the rendering loop"""
    global is_running

    is_running = False
    emit('status', {'message': 'Rendering stopped', 'type': 'info'})

@socketio.on('get_palettes')
def handle_get_palettes():
    """Get list of loaded palettes"""
    try:
        emit('palettes_list', {'palettes': get_engine().get_palettes()})

    except Exception as e:
        emit('status', {'message': f'Error getting palettes: {str(e)}', 'type': 'error'})

@socketio.on('get_status')
def handle_get_status():
    """Get the animation state"""
    emit('engine_status', get_engine().get_status())

def render_loop():
    """Main rendering loop that runs in a separate thread"""
    global is_running

    frame_time = 1.0 / FPS
    frame_count = 0

    logger.info("Render loop started")

    while is_running:
        start_time = time.time()

        try:
            image_data, error = get_engine().render_frame()

            if image_data:
                socketio.emit('frame', {'image': image_data})
                frame_count += 1
                if frame_count % 300 == 0:
                    logger.debug("Rendered %d frames", frame_count)
            elif error:
                logger.error("Render error: %s", error)
                socketio.emit('status', {'message': error, 'type': 'error'})
                is_running = False

        except Exception as e:
            logger.exception("Exception in render loop")
            socketio.emit('status', {'message': f'Render error: {str(e)}', 'type': 'error'})
            is_running = False

        # Maintain target FPS
        elapsed = time.time() - start_time
        sleep_time = max(0, frame_time - elapsed)
        time.sleep(sleep_time)

    logger.info("Render loop stopped")

def create_app(config_name=None):
    """Application factory pattern"""
    global engine
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    app.config.from_object(config[config_name])
    configure_logging(app.config['FLUERE_LOG_LEVEL'])
    engine = None
    return app

if __name__ == '__main__':
    create_app(config_name)
    logger.info("Starting Fluere viewer...")

    port = int(os.environ.get('PORT', 5001))
    host = os.environ.get('HOST', '0.0.0.0')

    if app.config['DEBUG']:
        logger.info("Development mode: http://localhost:%d", port)
        socketio.run(app, host=host, port=port, debug=True, allow_unsafe_werkzeug=True)
    else:
        logger.info("Production mode: http://%s:%d", host, port)
        socketio.run(app, host=host, port=port, debug=False)
