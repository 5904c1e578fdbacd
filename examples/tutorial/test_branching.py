"""Conditional branching: ``sign_label`` forgets the zero branch."""
from unitrun import identical, is_a


def sign_label(x):
    if x > 0:
        return "positive"
    elif x < 0:
        return "negative"


def test_positive():
    identical(sign_label(3), "positive")


def test_negative():
    identical(sign_label(-2.5), "negative")


def test_zero():
    identical(sign_label(0), "zero")


def test_label_is_character():
    is_a(sign_label(1), "character")
