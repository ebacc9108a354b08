"""
API endpoint tests covering routing, permissions and the response envelope.
"""
from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from apps.discounts.models import Discount
from apps.orders.models import Order
from tests.factories import DiscountFactory, OrderFactory, checkout_data

pytestmark = pytest.mark.django_db


class TestDiscountEndpoints:

    def test_validate_coupon(self, api_client):
        DiscountFactory(name='SAVE50', discount_type='FIXED_AMOUNT', discount_value=Decimal('50'),
                        min_order_amount=Decimal('100'))

        response = api_client.get('/api/discounts/validate/SAVE50/', {'orderAmount': '80'})

        assert response.status_code == 200
        assert response.data['code'] == 200
        assert response.data['data']['isValid'] is False
        assert response.data['msg'] == 'Minimum order amount of ₹100.00 required'

    def test_validate_coupon_rejects_bad_amount(self, api_client):
        response = api_client.get('/api/discounts/validate/ANY/', {'orderAmount': 'lots'})
        assert response.status_code == 400

    def test_calculate_cart(self, api_client, product):
        DiscountFactory(discount_value=Decimal('10'))

        response = api_client.post('/api/discounts/calculate-cart/', {
            'items': [{'product_id': product.id, 'quantity': 2}],
        }, format='json')

        assert response.status_code == 200
        data = response.data['data']
        assert data['subtotal'] == Decimal('1000.00')
        assert data['totalDiscount'] == Decimal('100.00')
        assert data['finalTotal'] == Decimal('900.00')

    def test_calculate_cart_requires_items(self, api_client):
        response = api_client.post('/api/discounts/calculate-cart/', {'items': []}, format='json')
        assert response.status_code == 400
        assert 'items' in response.data['errors']

    def test_product_offer_for_unknown_product(self, api_client):
        response = api_client.get('/api/discounts/product/999999/')

        assert response.status_code == 404
        assert response.data == {
            'code': 404,
            'msg': 'Product not found: 999999',
            'errors': {'detail': 'Product not found: 999999'},
        }

    def test_available_discounts(self, api_client, product):
        discount = DiscountFactory(product=product)
        response = api_client.post('/api/discounts/available/', {'product_ids': [product.id]}, format='json')
        assert [d['id'] for d in response.data['data']] == [discount.id]

    def test_apply_requires_authentication(self, api_client):
        response = api_client.post('/api/discounts/apply/1/1/')
        assert response.status_code == 401

    def test_apply_ineligible_discount(self, customer_client, customer):
        order = OrderFactory(user=customer)
        discount = DiscountFactory(min_order_amount=Decimal('5000'))

        response = customer_client.post(f'/api/discounts/apply/{order.id}/{discount.id}/')

        assert response.status_code == 422
        assert response.data['errors']['reason'] == 'min_order_amount'


class TestDiscountAdminEndpoints:

    def payload(self, **overrides):
        now = timezone.now()
        data = {
            'name': 'FESTIVE',
            'discount_type': 'PERCENTAGE',
            'discount_value': '20.00',
            'valid_from': now.isoformat(),
            'valid_until': (now + timedelta(days=10)).isoformat(),
        }
        data.update(overrides)
        return data

    def test_customers_are_forbidden(self, customer_client):
        assert customer_client.get('/api/discounts/').status_code == 403

    def test_create_and_list(self, admin_client, admin_account):
        response = admin_client.post('/api/discounts/', self.payload(), format='json')

        assert response.status_code == 201
        assert Discount.objects.get(name='FESTIVE').created_by == admin_account

        listing = admin_client.get('/api/discounts/')
        assert listing.data['data']['page']['total'] == 1
        assert listing.data['data']['list'][0]['name'] == 'FESTIVE'

    def test_percentage_above_hundred_is_rejected(self, admin_client):
        response = admin_client.post('/api/discounts/', self.payload(discount_value='150'), format='json')

        assert response.status_code == 400
        assert 'discount_value' in response.data['errors']
        assert not Discount.objects.exists()

    def test_inverted_window_is_rejected(self, admin_client):
        now = timezone.now()
        response = admin_client.post('/api/discounts/', self.payload(
            valid_from=now.isoformat(), valid_until=(now - timedelta(days=1)).isoformat()
        ), format='json')
        assert response.status_code == 400

    def test_detail_update_toggle_delete(self, admin_client):
        discount = DiscountFactory()

        detail = admin_client.get(f'/api/discounts/{discount.id}/')
        assert detail.data['data']['recent_usages'] == []

        updated = admin_client.patch(f'/api/discounts/{discount.id}/', {'discount_value': '12.50'}, format='json')
        assert updated.data['data']['discount_value'] == Decimal('12.50')

        toggled = admin_client.patch(f'/api/discounts/{discount.id}/toggle/', {}, format='json')
        assert toggled.data['data']['is_active'] is False

        assert admin_client.delete(f'/api/discounts/{discount.id}/').status_code == 200
        assert not Discount.objects.exists()

    def test_stats(self, admin_client):
        DiscountFactory()
        response = admin_client.get('/api/discounts/stats/')
        assert response.data['data']['totalDiscounts'] == 1
        assert len(response.data['data']['recentDiscounts']) == 1


class TestOrderEndpoints:

    def test_quote_is_anonymous(self, api_client, product):
        response = api_client.post('/api/orders/quote/', {
            'items': [{'product_id': product.id, 'quantity': 1}],
            'state': 'Kerala',
        }, format='json')

        assert response.status_code == 200
        assert response.data['data']['totalAmount'] == Decimal('600.00')
        assert response.data['data']['totalAmountMinor'] == 60000

    def test_cod_checkout(self, customer_client, product):
        response = customer_client.post(
            '/api/orders/cod/', checkout_data([{'product_id': product.id, 'quantity': 1}], 'NOPE'), format='json'
        )

        assert response.status_code == 201
        assert response.data['data']['discountError'] == 'Invalid discount code'
        order_number = response.data['data']['order']['order_number']

        detail = customer_client.get(f'/api/orders/{order_number}/')
        assert detail.data['data']['total_amount'] == Decimal('580.00')

    def test_cod_checkout_validates_address(self, customer_client, product):
        data = checkout_data([{'product_id': product.id, 'quantity': 1}])
        data['pincode'] = '12'

        response = customer_client.post('/api/orders/cod/', data, format='json')

        assert response.status_code == 400
        assert 'pincode' in response.data['errors']
        assert not Order.objects.exists()

    def test_refund_is_admin_only(self, customer_client, customer):
        order = OrderFactory(user=customer)
        assert customer_client.post(f'/api/orders/{order.order_number}/refund/').status_code == 403


class TestPaymentEndpoints:

    def test_initiate_confirm_and_status(self, customer_client, product):
        data = checkout_data([{'product_id': product.id, 'quantity': 1}])
        data['gateway'] = 'fake'

        initiated = customer_client.post('/api/payments/initiate/', data, format='json')
        assert initiated.status_code == 201
        gateway_order_id = initiated.data['data']['gatewayOrderId']
        assert initiated.data['data']['amountMinor'] == 58000

        confirmed = customer_client.post('/api/payments/confirm/', {
            'gateway_order_id': gateway_order_id, 'payload': {'payment_id': 'fakepay_x'},
        }, format='json')
        assert confirmed.status_code == 200
        assert confirmed.data['data']['payment_status'] == 'PAID'

        status = customer_client.get(f'/api/payments/status/{gateway_order_id}/')
        assert status.data['data']['status'] == 'success'
        assert status.data['data']['order_number'] == confirmed.data['data']['order_number']

    def test_unknown_gateway_is_rejected(self, customer_client, product):
        data = checkout_data([{'product_id': product.id, 'quantity': 1}])
        data['gateway'] = 'paypal'
        assert customer_client.post('/api/payments/initiate/', data, format='json').status_code == 400