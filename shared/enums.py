"""Shared enumerations"""
from enum import Enum


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


class View(str, Enum):
    """Top-level screens of the client"""
    LOGIN = "login"
    REGISTER = "register"
    MAIN = "main"


class Tab(str, Enum):
    """Tabs of the main view, in display order"""
    HOME = "home"
    ABOUT = "about"
    GALLERY = "gallery"
    SUPPORT = "support"
    USERS = "users"


TAB_LABELS = {
    Tab.HOME: "Home",
    Tab.ABOUT: "About us",
    Tab.GALLERY: "Gallery",
    Tab.SUPPORT: "Support",
    Tab.USERS: "Users",
}
