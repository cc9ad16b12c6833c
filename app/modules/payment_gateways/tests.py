"""
Tests para el módulo de Pasarelas de pago

Cubren enmascarado de secretos, activación con campos completos y la
conservación de secretos cuando el cliente reenvía el valor enmascarado.
"""

import pytest

from app.common.exceptions import NotFound, ValidationError
from app.modules.payment_gateways.models import GatewayType
from app.modules.payment_gateways.schemas import PaymentGatewayIn
from app.modules.payment_gateways.service import MASK, PaymentGatewayService, mask_value


WISE_CONFIG = {"apiToken": "wise-token-123456", "profileId": "P-42", "environment": "sandbox"}


class TestMasking:

    def test_mask_long_value_keeps_last_four(self):
        assert mask_value("sk_live_abcdef1234") == MASK + "1234"

    def test_mask_short_value(self):
        assert mask_value("abc") == MASK

    def test_mask_empty(self):
        assert mask_value("") == ""


class TestPaymentGatewayService:
    """Tests del servicio de pasarelas"""

    def test_list_includes_every_gateway(self, storage):
        gateways = PaymentGatewayService(storage).list_gateways("user_1")
        assert [g.gateway_type for g in gateways] == list(GatewayType)
        by_type = {g.gateway_type: g for g in gateways}
        assert by_type[GatewayType.STRIPE].configured
        assert not by_type[GatewayType.WISE].configured
        assert by_type[GatewayType.WISE].missing_fields == ["apiToken", "profileId", "environment"]

    def test_secrets_are_masked(self, storage):
        paypal = PaymentGatewayService(storage).get_gateway(GatewayType.PAYPAL, "user_1")
        assert paypal.config["clientId"] == "paypal_client_id"
        assert paypal.config["clientSecret"] == MASK + "cret"
        assert paypal.config["environment"] == "sandbox"

    def test_activate_requires_all_fields(self, storage):
        data = PaymentGatewayIn(config={"apiToken": "wise-token-123456"}, is_active=True)
        with pytest.raises(ValidationError) as exc:
            PaymentGatewayService(storage).save_gateway(GatewayType.WISE, data, "user_1")
        assert "profileId" in exc.value.detail

    def test_save_inactive_partial_config(self, storage):
        data = PaymentGatewayIn(config={"apiToken": "wise-token-123456"})
        result = PaymentGatewayService(storage).save_gateway(GatewayType.WISE, data, "user_1")
        assert not result.is_active
        assert not result.configured

    def test_save_and_activate(self, storage):
        service = PaymentGatewayService(storage)
        result = service.save_gateway(GatewayType.WISE, PaymentGatewayIn(config=WISE_CONFIG, is_active=True), "user_1")
        assert result.is_active
        assert result.configured
        assert service.is_active_gateway("user_1", "wise")

    def test_masked_value_keeps_stored_secret(self, storage):
        service = PaymentGatewayService(storage)
        data = PaymentGatewayIn(
            config={"publishableKey": "pk_live_new", "secretKey": MASK + "_..."},
            is_active=True,
        )
        service.save_gateway(GatewayType.STRIPE, data, "user_1")

        stored = storage.payment_gateways.get("gateway_1")["config"]
        assert stored["publishableKey"] == "pk_live_new"
        assert stored["secretKey"] == "sk_test_..."
        assert stored["webhookSecret"] == "whsec_..."

    def test_unknown_field(self, storage):
        data = PaymentGatewayIn(config={"password": "x"})
        with pytest.raises(ValidationError):
            PaymentGatewayService(storage).save_gateway(GatewayType.STRIPE, data, "user_1")

    def test_invalid_option(self, storage):
        data = PaymentGatewayIn(config={**WISE_CONFIG, "environment": "staging"})
        with pytest.raises(ValidationError):
            PaymentGatewayService(storage).save_gateway(GatewayType.WISE, data, "user_1")

    def test_set_active_unconfigured(self, storage):
        with pytest.raises(NotFound):
            PaymentGatewayService(storage).set_active(GatewayType.PAYONEER, True, "user_1")

    def test_deactivate(self, storage):
        service = PaymentGatewayService(storage)
        result = service.set_active(GatewayType.STRIPE, False, "user_1")
        assert not result.is_active
        assert service.active_gateway_types("user_1") == [GatewayType.PAYPAL]


class TestPaymentGatewayEndpoints:
    """Tests de la API de pasarelas"""

    def test_definitions(self, client):
        response = client.get("/payment-gateways/definitions")
        assert response.status_code == 200
        assert len(response.json()) == 6

    def test_list(self, client):
        response = client.get("/payment-gateways/")
        assert response.status_code == 200
        stripe = next(g for g in response.json() if g["gateway_type"] == "stripe")
        assert stripe["config"]["secretKey"].startswith(MASK)

    def test_save_missing_fields(self, client):
        response = client.put("/payment-gateways/xoom", json={"config": {"apiKey": "abc"}, "is_active": True})
        assert response.status_code == 400

    def test_save(self, client):
        response = client.put("/payment-gateways/wise", json={"config": WISE_CONFIG, "is_active": True})
        assert response.status_code == 200
        assert response.json()["config"]["apiToken"] == MASK + "3456"

    def test_activate_unconfigured(self, client):
        assert client.post("/payment-gateways/payoneer/activate").status_code == 404

    def test_deactivate_and_delete(self, client):
        assert client.post("/payment-gateways/paypal/deactivate").json()["is_active"] is False
        assert client.delete("/payment-gateways/paypal").status_code == 204
        assert client.get("/payment-gateways/paypal").json()["configured"] is False

    def test_unknown_gateway(self, client):
        assert client.get("/payment-gateways/venmo").status_code == 422
