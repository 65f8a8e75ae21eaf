"""
Sweeper module.
Contains the sweep loop and the task handler registry.
"""

from delaytask.sweeper.handlers import register_handler
from delaytask.sweeper.main import Sweeper, run

__all__ = ["Sweeper", "register_handler", "run"]
