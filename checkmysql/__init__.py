"""InnoGames Monitoring Plugins - MySQL server checks"""

__version__ = '1.0.0'
