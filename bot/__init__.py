"""Hotel concierge sample bot built on the dialog runtime."""
from bot.check_in import CheckIn
from bot.hotel_bot import HotelBot
from bot.menu import MENUS, MenuControl
from bot.reserve_table import ReserveTable
from bot.wake_up import WakeUp

__all__ = ["CheckIn", "HotelBot", "MENUS", "MenuControl", "ReserveTable", "WakeUp"]
