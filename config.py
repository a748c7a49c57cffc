import os


def _env_int(name, default):
    value = os.environ.get(name)
    if value is None or value.strip() == '':
        return default
    return int(value)


class Config:
    """Base configuration"""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'fluere_viewer_secret_change_in_production'

    # Drawing settings
    FLUERE_WIDTH = _env_int('FLUERE_WIDTH', 1280)
    FLUERE_HEIGHT = _env_int('FLUERE_HEIGHT', 720)
    FLUERE_NUM_KNOTS = _env_int('FLUERE_NUM_KNOTS', 4)
    FLUERE_SEED = _env_int('FLUERE_SEED', None)
    FLUERE_PALETTE_FILE = os.environ.get('FLUERE_PALETTE_FILE') or None
    FLUERE_SCREENSHOT_DIR = os.environ.get('FLUERE_SCREENSHOT_DIR') or None
    FLUERE_LOG_LEVEL = os.environ.get('FLUERE_LOG_LEVEL', 'INFO')

class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True

class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False

    def __init__(self):
        if not os.environ.get('SECRET_KEY'):
            raise ValueError("SECRET_KEY environment variable must be set in production")
        self.SECRET_KEY = os.environ.get('SECRET_KEY')

class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    DEBUG = True

    # Small frames keep test renders quick
    FLUERE_WIDTH = 32
    FLUERE_HEIGHT = 24
    FLUERE_SEED = 1234

config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
