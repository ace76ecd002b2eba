import argparse
import asyncio
import sys

from pydantic import ValidationError

from momopay.providers.mobile_money.momo import CollectionApi, DisbursementApi
from momopay.schemas import TransactionStatusResponse


async def _fetch(product: str, reference_id: str):
    if product == "collection":
        async with CollectionApi.from_settings() as api:
            return await api.request_to_pay_status(reference_id)
    async with DisbursementApi.from_settings() as api:
        return await api.transfer_status(reference_id)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Print the status of a MoMo transfer or request-to-pay.")
    parser.add_argument("reference_id")
    parser.add_argument("--product", choices=("collection", "disbursement"), default="disbursement")
    args = parser.parse_args(argv)

    result = asyncio.run(_fetch(args.product, args.reference_id.strip()))
    if not result.ok:
        print("error=%s" % getattr(result.error, "message", result.error))
        print("raw=%s" % getattr(result.error, "raw", None))
        return 1

    print("status=%s" % result.data.value)
    print("json=%s" % result.raw)
    try:
        body = TransactionStatusResponse.model_validate(result.raw)
    except ValidationError:
        return 0
    if body.reason is not None:
        print("reason=%s %s" % (body.reason.code, body.reason.message or ""))
    return 0


if __name__ == "__main__":
    sys.exit(main())
