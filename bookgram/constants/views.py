from enum import Enum


class View(str, Enum):
    STORE = "STORE"
    COMMUNITY = "COMMUNITY"
    PROFILE = "PROFILE"
    CART = "CART"
    CHECKOUT = "CHECKOUT"
    BOOK_DETAILS = "BOOK_DETAILS"
    ORDER_SUCCESS = "ORDER_SUCCESS"
