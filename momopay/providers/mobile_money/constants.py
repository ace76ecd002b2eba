from __future__ import annotations

from enum import Enum


class TargetEnvironment(str, Enum):
    """Values accepted by the X-Target-Environment header."""

    MTN_BENIN = "mtnbenin"
    MTN_CAMEROON = "mtncameroon"
    MTN_CONGO = "mtncongo"
    MTN_GHANA = "mtnghana"
    MTN_GUINEA_CONAKRY = "mtnguineaconakry"
    MTN_IVORY_COAST = "mtnivorycoast"
    MTN_LIBERIA = "mtnliberia"
    MTN_SOUTH_AFRICA = "mtnsouthafrica"
    MTN_SWAZILAND = "mtnswaziland"
    MTN_UGANDA = "mtnuganda"
    MTN_ZAMBIA = "mtnzambia"
    SANDBOX = "sandbox"

    @property
    def is_sandbox(self) -> bool:
        return self is TargetEnvironment.SANDBOX


class ApiProduct(str, Enum):
    COLLECTION = "collection"
    DISBURSEMENT = "disbursement"


class ErrorCode(str, Enum):
    """Reason codes the provider reports on failed transactions."""

    PAYEE_NOT_FOUND = "PAYEE_NOT_FOUND"
    PAYER_NOT_FOUND = "PAYER_NOT_FOUND"
    NOT_ALLOWED = "NOT_ALLOWED"
    NOT_ALLOWED_TARGET_ENVIRONMENT = "NOT_ALLOWED_TARGET_ENVIRONMENT"
    INVALID_CALLBACK_URL_HOST = "INVALID_CALLBACK_URL_HOST"
    INVALID_CURRENCY = "INVALID_CURRENCY"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    INTERNAL_PROCESSING_ERROR = "INTERNAL_PROCESSING_ERROR"
    NOT_ENOUGH_FUNDS = "NOT_ENOUGH_FUNDS"
    PAYER_LIMIT_REACHED = "PAYER_LIMIT_REACHED"
    PAYEE_NOT_ALLOWED_TO_RECEIVE = "PAYEE_NOT_ALLOWED_TO_RECEIVE"
    PAYMENT_NOT_APPROVED = "PAYMENT_NOT_APPROVED"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    APPROVAL_REJECTED = "APPROVAL_REJECTED"
    EXPIRED = "EXPIRED"
    TRANSACTION_CANCELED = "TRANSACTION_CANCELED"
    RESOURCE_ALREADY_EXIST = "RESOURCE_ALREADY_EXIST"


SANDBOX_HOST = "https://sandbox.momodeveloper.mtn.com"
LIVE_HOST = "https://proxy.momoapi.mtn.com"
DEFAULT_API_VERSION = "v1_0"

# "Use Currency Code specific to the Country"; the sandbox only takes EUR.
ENVIRONMENT_CURRENCY: dict[TargetEnvironment, str] = {
    TargetEnvironment.MTN_BENIN: "XOF",
    TargetEnvironment.MTN_CAMEROON: "XAF",
    TargetEnvironment.MTN_CONGO: "XAF",
    TargetEnvironment.MTN_GHANA: "GHS",
    TargetEnvironment.MTN_GUINEA_CONAKRY: "GNF",
    TargetEnvironment.MTN_IVORY_COAST: "XOF",
    TargetEnvironment.MTN_LIBERIA: "LRD",
    TargetEnvironment.MTN_SOUTH_AFRICA: "ZAR",
    TargetEnvironment.MTN_SWAZILAND: "SZL",
    TargetEnvironment.MTN_UGANDA: "UGX",
    TargetEnvironment.MTN_ZAMBIA: "ZMW",
    TargetEnvironment.SANDBOX: "EUR",
}

# Sandbox has no country; it is never looked up here.
ENVIRONMENT_COUNTRY: dict[TargetEnvironment, str] = {
    TargetEnvironment.MTN_BENIN: "BJ",
    TargetEnvironment.MTN_CAMEROON: "CM",
    TargetEnvironment.MTN_CONGO: "CG",
    TargetEnvironment.MTN_GHANA: "GH",
    TargetEnvironment.MTN_GUINEA_CONAKRY: "GN",
    TargetEnvironment.MTN_IVORY_COAST: "CI",
    TargetEnvironment.MTN_LIBERIA: "LR",
    TargetEnvironment.MTN_SOUTH_AFRICA: "ZA",
    TargetEnvironment.MTN_SWAZILAND: "SZ",
    TargetEnvironment.MTN_UGANDA: "UG",
    TargetEnvironment.MTN_ZAMBIA: "ZM",
}

COUNTRY_CALLING_CODE: dict[str, int] = {
    "BJ": 229,
    "CG": 242,
    "CI": 225,
    "CM": 237,
    "GH": 233,
    "GN": 224,
    "LR": 231,
    "SZ": 268,
    "UG": 256,
    "ZA": 27,
    "ZM": 260,
}

# Active ISO-4217 alphabetic codes.
ISO4217_CURRENCIES: frozenset[str] = frozenset(
    """
    AED AFN ALL AMD ANG AOA ARS AUD AWG AZN BAM BBD BDT BGN BHD BIF BMD BND BOB
    BOV BRL BSD BTN BWP BYN BZD CAD CDF CHE CHF CHW CLF CLP CNY COP COU CRC CUC
    CUP CVE CZK DJF DKK DOP DZD EGP ERN ETB EUR FJD FKP GBP GEL GHS GIP GMD GNF
    GTQ GYD HKD HNL HRK HTG HUF IDR ILS INR IQD IRR ISK JMD JOD JPY KES KGS KHR
    KMF KPW KRW KWD KYD KZT LAK LBP LKR LRD LSL LYD MAD MDL MGA MKD MMK MNT MOP
    MRU MUR MVR MWK MXN MXV MYR MZN NAD NGN NIO NOK NPR NZD OMR PAB PEN PGK PHP
    PKR PLN PYG QAR RON RSD RUB RWF SAR SBD SCR SDG SEK SGD SHP SLE SLL SOS SRD
    SSP STN SVC SYP SZL THB TJS TMT TND TOP TRY TTD TWD TZS UAH UGX USD USN UYI
    UYU UYW UZS VED VES VND VUV WST XAF XAG XAU XBA XBB XBC XBD XCD XDR XOF XPD
    XPF XPT XSU XTS XUA XXX YER ZAR ZMW ZWL
    """.split()
)
