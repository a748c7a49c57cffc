"""
WSGI entry point for the Fluere viewer
"""

from backend.app import app, create_app, socketio

create_app()

if __name__ == "__main__":
    # This is for when running with gunicorn
    socketio.run(app)
