"""
Domain exceptions and the custom exception handler for consistent API responses
"""
from rest_framework.views import exception_handler
from rest_framework.exceptions import APIException
from rest_framework import status
import logging

logger = logging.getLogger(__name__)


class PricingError(APIException):
    """Base class for storefront domain errors rendered through the API envelope"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Request could not be processed'
    default_code = 'pricing_error'


class PricingValidationError(PricingError):
    """Bad input shape: missing product/quantity, invalid discount values or date ranges"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Validation error'
    default_code = 'validation_error'


class NotFoundError(PricingError):
    """Unknown product, variant, discount or order identifier"""
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Resource not found'
    default_code = 'not_found'


class IneligibilityError(PricingError):
    """A discount cannot be applied: role mismatch, exhausted limits, minimum not met"""
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_detail = 'Not eligible for this discount'
    default_code = 'ineligible'

    def __init__(self, detail=None, reason=None):
        super().__init__(detail)
        self.reason = reason or self.default_code


class ConcurrencyConflict(PricingError):
    """Lost a race on a bounded counter; the caller may retry once with fresh data"""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'No longer available, please try again'
    default_code = 'conflict'


class DiscountConflictError(ConcurrencyConflict):
    default_detail = 'Discount is no longer available'
    default_code = 'discount_conflict'


class OutOfStockError(ConcurrencyConflict):
    default_detail = 'Insufficient stock'
    default_code = 'out_of_stock'


class PaymentVerificationError(PricingError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Payment verification failed'
    default_code = 'payment_verification_failed'


class PricingMismatchError(PricingError):
    """Confirmation-time total differs from the amount charged at the gateway"""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Order total changed after payment was initiated'
    default_code = 'pricing_mismatch'


class GatewayError(PricingError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = 'Payment gateway error'
    default_code = 'gateway_error'


def custom_exception_handler(exc, context):
    """
    Custom exception handler that returns consistent error responses
    """
    # Call REST framework's default exception handler first
    response = exception_handler(exc, context)

    if response is not None:
        if response.status_code >= 500:
            logger.error(f"API Exception: {exc}", exc_info=True)
        else:
            logger.warning(f"API Exception: {exc}")

        # Create custom error response format
        custom_response_data = {
            'code': response.status_code,
            'msg': 'An error occurred',
            'errors': response.data
        }

        # Domain errors carry their own user-facing message
        if isinstance(exc, PricingError):
            custom_response_data['msg'] = str(exc.detail)
            if isinstance(exc, IneligibilityError):
                custom_response_data['errors'] = {'detail': str(exc.detail), 'reason': exc.reason}
        elif response.status_code == status.HTTP_400_BAD_REQUEST:
            custom_response_data['msg'] = 'Validation error'
        elif response.status_code == status.HTTP_401_UNAUTHORIZED:
            custom_response_data['msg'] = 'Authentication required'
        elif response.status_code == status.HTTP_403_FORBIDDEN:
            custom_response_data['msg'] = 'Permission denied'
        elif response.status_code == status.HTTP_404_NOT_FOUND:
            custom_response_data['msg'] = 'Resource not found'
        elif response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            custom_response_data['msg'] = 'Method not allowed'
        elif response.status_code >= 500:
            custom_response_data['msg'] = 'Internal server error'
            # Don't expose internal errors in production
            if not hasattr(context['request'], 'user') or not context['request'].user.is_staff:
                custom_response_data['errors'] = {'detail': 'Internal server error'}

        response.data = custom_response_data

    return response
