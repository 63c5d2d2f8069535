from enum import Enum


class PromotionTier(str, Enum):
    NONE = "NONE"
    BUY_2_GET_3 = "BUY_2_GET_3"
    BUY_3_GET_5 = "BUY_3_GET_5"


# (minimum total quantity, tier), checked top to bottom
TIER_THRESHOLDS = [
    (5, PromotionTier.BUY_3_GET_5),
    (3, PromotionTier.BUY_2_GET_3),
]

FREE_ITEMS_BY_TIER = {
    PromotionTier.BUY_3_GET_5: 2,
    PromotionTier.BUY_2_GET_3: 1,
    PromotionTier.NONE: 0,
}

# Applied after the tier table, whatever the tier says
MAX_FREE_ITEMS_PER_ORDER = 2

FLAT_SHIPPING_CENTS = 500

MAX_QTY_PER_LINE = 99

# shirt printing limits
MAX_PERSONALIZATION_NAME = 14
MAX_PERSONALIZATION_DIGITS = 3
