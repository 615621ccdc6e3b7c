"""
Configuration management for the farm hub schedule engine
Handles environment-based settings for ordering weights, timers and the farm clock

Uses the lazy validation pattern: settings are only checked when
validation is explicitly requested.
"""
from decouple import config
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from farmhub.error_handlers.exceptions import ConfigurationException


class Config:
    """Base configuration class"""
    # Farm clock (used to resolve the current slot and the report prompt)
    SCHEDULE_TIMEZONE = config('SCHEDULE_TIMEZONE', default='Pacific/Honolulu')

    # Timers
    DATA_REFRESH_SECONDS = config('DATA_REFRESH_SECONDS', default=45, cast=int)
    CLOCK_TICK_SECONDS = config('CLOCK_TICK_SECONDS', default=60, cast=int)

    # Person ordering weights
    ANCHOR_BOOST_WEIGHT = config('ANCHOR_BOOST_WEIGHT', default=1.0, cast=float)
    STREAK_WEIGHT = config('STREAK_WEIGHT', default=0.5, cast=float)

    # Daily report prompt opens at this local hour
    REPORT_PROMPT_HOUR = config('REPORT_PROMPT_HOUR', default=14, cast=int)

    # User type string that maps to the external volunteer role
    EXTERNAL_VOLUNTEER_ROLE = config('EXTERNAL_VOLUNTEER_ROLE', default='External Volunteer')

    # Logging settings
    LOG_LEVEL = config('LOG_LEVEL', default='INFO')
    LOG_FILE = config('LOG_FILE', default='logs/farmhub.log')

    @classmethod
    def validate(cls) -> None:
        """
        Validate configuration

        Raises:
            ConfigurationException: If a setting is out of range

        Example:
            >>> config = get_config()
            >>> config.validate()
        """
        problems = []

        try:
            ZoneInfo(cls.SCHEDULE_TIMEZONE)
        except (ZoneInfoNotFoundError, ValueError):
            problems.append(f"SCHEDULE_TIMEZONE '{cls.SCHEDULE_TIMEZONE}' is not a known IANA timezone")

        if cls.DATA_REFRESH_SECONDS <= 0:
            problems.append('DATA_REFRESH_SECONDS must be positive')
        if cls.CLOCK_TICK_SECONDS <= 0:
            problems.append('CLOCK_TICK_SECONDS must be positive')
        if cls.ANCHOR_BOOST_WEIGHT < 0:
            problems.append('ANCHOR_BOOST_WEIGHT must not be negative')
        if cls.STREAK_WEIGHT < 0:
            problems.append('STREAK_WEIGHT must not be negative')
        if not 0 <= cls.REPORT_PROMPT_HOUR <= 23:
            problems.append('REPORT_PROMPT_HOUR must be between 0 and 23')

        if problems:
            raise ConfigurationException(
                '; '.join(problems),
                details={'problems': problems}
            )


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False
    LOG_LEVEL = config('LOG_LEVEL', default='DEBUG')


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    DEBUG = False
    SCHEDULE_TIMEZONE = 'Pacific/Honolulu'
    DATA_REFRESH_SECONDS = 45
    CLOCK_TICK_SECONDS = 60
    ANCHOR_BOOST_WEIGHT = 1.0
    STREAK_WEIGHT = 0.5
    REPORT_PROMPT_HOUR = 14
    EXTERNAL_VOLUNTEER_ROLE = 'External Volunteer'


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False

    # Logging
    LOG_LEVEL = config('LOG_LEVEL', default='WARNING')


# Configuration mapping
config_mapping = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}


def get_config(config_name: Optional[str] = None, validate: bool = False) -> type:
    """
    Get configuration class based on environment.

    Args:
        config_name: Environment name ('development', 'testing', 'production')
        validate: Whether to validate configuration immediately (default: False)

    Returns:
        Config class for the specified environment

    Raises:
        ConfigurationException: If validation is enabled and a setting is invalid

    Example:
        >>> config = get_config()
        >>> config = get_config('production', validate=True)
    """
    if config_name is None:
        config_name = config('FARMHUB_ENV', default='development')

    config_class = config_mapping.get(config_name, DevelopmentConfig)

    if validate:
        config_class.validate()

    return config_class
