"""
Value types produced by discount resolution and the cart calculator.

Cart results are a closed union: a cart either has exactly one coupon
applied, a set of per-product discounts, or nothing. Coupon and
product-level discounts never coexist in one result.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple, Union

from apps.common.money import ZERO, quantize_money


class DiscountLevel(str, Enum):
    ORDER_LEVEL = 'ORDER_LEVEL'
    PRODUCT_LEVEL = 'PRODUCT_LEVEL'


@dataclass(frozen=True)
class CartLine:
    """One product line as seen by the discount calculator"""
    product_id: int
    quantity: int
    unit_price: Decimal
    category_id: Optional[int] = None
    subcategory_id: Optional[int] = None
    product_name: str = ''
    line_total: Optional[Decimal] = None

    @property
    def total(self) -> Decimal:
        if self.line_total is not None:
            return quantize_money(self.line_total)
        return quantize_money(self.unit_price * self.quantity)


@dataclass(frozen=True)
class DiscountCandidate:
    discount: object
    amount: Decimal


@dataclass(frozen=True)
class AppliedDiscount:
    level: DiscountLevel
    discount_id: int
    name: str
    discount_type: str
    discount_value: Decimal
    amount: Decimal
    description: str
    code: Optional[str] = None
    product_id: Optional[int] = None
    product_name: Optional[str] = None
    max_discount_reached: bool = False

    def to_dict(self):
        data = {
            'type': self.level.value,
            'discountId': self.discount_id,
            'name': self.name,
            'discountType': self.discount_type,
            'discountValue': self.discount_value,
            'amount': self.amount,
            'description': self.description,
        }
        if self.level is DiscountLevel.ORDER_LEVEL:
            data['code'] = self.code
            data['maxDiscountReached'] = self.max_discount_reached
        else:
            data['productId'] = self.product_id
            data['productName'] = self.product_name
        return data


@dataclass(frozen=True)
class CouponValidation:
    is_valid: bool
    message: str = ''
    discount: Optional[object] = None
    discount_amount: Decimal = ZERO
    max_discount_reached: bool = False

    def to_dict(self):
        if not self.is_valid:
            return {'isValid': False, 'message': self.message}
        discount = self.discount
        return {
            'isValid': True,
            'message': self.message,
            'discount': {
                'id': discount.id,
                'name': discount.name,
                'description': discount.description,
                'discountType': discount.discount_type,
                'discountValue': discount.discount_value,
                'maxDiscount': discount.max_discount,
                'minOrderAmount': discount.min_order_amount,
                'discountAmount': self.discount_amount,
                'maxDiscountReached': self.max_discount_reached,
                'productId': discount.product_id,
                'categoryId': discount.category_id,
                'subcategoryId': discount.subcategory_id,
            },
        }


class _CartResult:
    subtotal: Decimal

    @property
    def applied_discounts(self) -> Tuple[AppliedDiscount, ...]:
        return ()

    @property
    def errors(self) -> Tuple[str, ...]:
        return ()

    @property
    def discount_code(self) -> Optional[str]:
        return None

    @property
    def total_discount(self) -> Decimal:
        return quantize_money(sum((d.amount for d in self.applied_discounts), ZERO))

    @property
    def final_total(self) -> Decimal:
        return max(ZERO, quantize_money(self.subtotal - self.total_discount))

    def to_dict(self):
        return {
            'subtotal': self.subtotal,
            'totalDiscount': self.total_discount,
            'finalTotal': self.final_total,
            'appliedDiscounts': [d.to_dict() for d in self.applied_discounts],
            'errors': list(self.errors) or None,
            'discountCode': self.discount_code,
        }


@dataclass(frozen=True)
class CouponApplied(_CartResult):
    subtotal: Decimal
    discount: AppliedDiscount
    code: str

    def __post_init__(self):
        if self.discount.level is not DiscountLevel.ORDER_LEVEL:
            raise ValueError("A coupon result carries exactly one order-level discount")

    @property
    def applied_discounts(self):
        return (self.discount,)

    @property
    def discount_code(self):
        return self.code


@dataclass(frozen=True)
class ProductDiscountsApplied(_CartResult):
    subtotal: Decimal
    discounts: Tuple[AppliedDiscount, ...]

    def __post_init__(self):
        if not self.discounts:
            raise ValueError("Use NoDiscount when no product discount applies")
        if any(d.level is not DiscountLevel.PRODUCT_LEVEL for d in self.discounts):
            raise ValueError("Product discount results only carry product-level discounts")

    @property
    def applied_discounts(self):
        return self.discounts


@dataclass(frozen=True)
class NoDiscount(_CartResult):
    subtotal: Decimal
    code: Optional[str] = None
    messages: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def errors(self):
        return self.messages

    @property
    def discount_code(self):
        return self.code


CartDiscountResult = Union[CouponApplied, ProductDiscountsApplied, NoDiscount]
