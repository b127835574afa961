"""petpassport — digital passports for rescued animals."""

__version__ = "0.1.0"
