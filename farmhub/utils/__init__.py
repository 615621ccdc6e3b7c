"""
Utility modules for the farm hub schedule engine
"""
from .timezone import farm_now, minutes_of_day, to_farm_time

__all__ = ['farm_now', 'minutes_of_day', 'to_farm_time']
