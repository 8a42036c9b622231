from enum import Enum


class Carrier(str, Enum):
    Speedaf = "speedaf"
    Tcs = "tcs"
