"""
Pasarelas de pago soportadas y los datos que necesita cada una
"""
from app.modules.payment_gateways.models import GatewayType
from app.modules.payment_gateways.schemas import GatewayDefinition, GatewayField

GATEWAY_DEFINITIONS = {
    GatewayType.STRIPE: GatewayDefinition(
        gateway_type=GatewayType.STRIPE,
        name="Stripe",
        description="Accept credit cards and digital payments worldwide",
        fields=[
            GatewayField(key="publishableKey", label="Publishable Key"),
            GatewayField(key="secretKey", label="Secret Key", secret=True),
            GatewayField(key="webhookSecret", label="Webhook Secret", secret=True),
        ],
    ),
    GatewayType.PAYPAL: GatewayDefinition(
        gateway_type=GatewayType.PAYPAL,
        name="PayPal",
        description="Accept PayPal payments and credit cards",
        fields=[
            GatewayField(key="clientId", label="Client ID"),
            GatewayField(key="clientSecret", label="Client Secret", secret=True),
            GatewayField(key="environment", label="Environment", options=["sandbox", "production"]),
        ],
    ),
    GatewayType.PAYONEER: GatewayDefinition(
        gateway_type=GatewayType.PAYONEER,
        name="Payoneer",
        description="Global payment platform for businesses",
        fields=[
            GatewayField(key="apiKey", label="API Key", secret=True),
            GatewayField(key="programId", label="Program ID"),
            GatewayField(key="environment", label="Environment", options=["sandbox", "production"]),
        ],
    ),
    GatewayType.LEMONSQUEEZY: GatewayDefinition(
        gateway_type=GatewayType.LEMONSQUEEZY,
        name="Lemon Squeezy",
        description="All-in-one platform for digital products",
        fields=[
            GatewayField(key="apiKey", label="API Key", secret=True),
            GatewayField(key="storeId", label="Store ID"),
            GatewayField(key="webhookSecret", label="Webhook Secret", secret=True),
        ],
    ),
    GatewayType.XOOM: GatewayDefinition(
        gateway_type=GatewayType.XOOM,
        name="Xoom",
        description="International money transfers by PayPal",
        fields=[
            GatewayField(key="apiKey", label="API Key", secret=True),
            GatewayField(key="apiSecret", label="API Secret", secret=True),
            GatewayField(key="partnerId", label="Partner ID"),
        ],
    ),
    GatewayType.WISE: GatewayDefinition(
        gateway_type=GatewayType.WISE,
        name="Wise",
        description="Low-cost international transfers",
        fields=[
            GatewayField(key="apiToken", label="API Token", secret=True),
            GatewayField(key="profileId", label="Profile ID"),
            GatewayField(key="environment", label="Environment", options=["sandbox", "live"]),
        ],
    ),
}


def required_keys(gateway_type: GatewayType):
    return [f.key for f in GATEWAY_DEFINITIONS[gateway_type].fields]


def secret_keys(gateway_type: GatewayType):
    return {f.key for f in GATEWAY_DEFINITIONS[gateway_type].fields if f.secret}
