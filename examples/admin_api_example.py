#!/usr/bin/env python3
"""
ZeroKit Admin API SDK - Request Signing Example

Shows how a call is canonicalized and signed offline, then performs a few
administrative calls against the tenant configured in ZKIT_SERVICE_URL and
ZKIT_ADMIN_KEY.
"""

import os

from zerokit_admin_sdk import (
    AdminApiClient,
    ApiError,
    InvalidConfigError,
    TransportError,
    create_client_from_env,
)

DEMO_KEY = "00" * 32


def signing_example():
    """Canonicalize and sign a call without touching the network"""
    print("=== Offline Signing Example ===")

    client = AdminApiClient("https://abcdefgh.api.tresorit.io", DEMO_KEY)
    print(f"   Tenant: {client.tenant_id}")
    print(f"   Admin user: {client.admin_user_id}")

    signed = client.sign_request(client.describe("POST", "/api/v4/admin/user/init-user-registration"))
    print("\n   String to sign:")
    for line in signed.string_to_sign.split("\n"):
        print(f"     {line}")
    print(f"\n   Authorization: {signed.headers.get('Authorization')}")
    client.close()


def error_handling_example():
    """Show the configuration errors raised before any call is made"""
    print("\n=== Error Handling Example ===")

    for service_url, admin_key, tenant_id in [
        ("https://example.com/", DEMO_KEY, None),
        ("https://abcdefgh.api.tresorit.io", "not-a-key", None),
        ("https://abcdefgh.api.tresorit.io", DEMO_KEY, "00testtest"),
    ]:
        try:
            AdminApiClient(service_url, admin_key, tenant_id)
        except InvalidConfigError as e:
            print(f"   {e.field}: {e}")


def live_example():
    """Register a user and try to enable it before registration finished"""
    print("\n=== Live API Example ===")

    with create_client_from_env() as client:
        registration = client.do_json_call("POST", "/api/v4/admin/user/init-user-registration")
        print(f"   New user: {registration['UserId']}")

        try:
            client.do_json_call(
                "POST",
                "/api/v4/admin/user/set-user-state",
                {"UserId": registration["UserId"], "Enable": True},
            )
        except ApiError as e:
            print(f"   API error {e.code}: {e.message}")

        result = client.execute("POST", "/api/v4/admin/user/init-user-registration")
        print(f"   init-user-registration finished in state {result.state.value} (HTTP {result.status_code})")


def main():
    """Run all examples"""
    print("ZeroKit Admin API SDK - Examples")
    print("=" * 50)

    signing_example()
    error_handling_example()

    if os.environ.get("ZKIT_SERVICE_URL") and os.environ.get("ZKIT_ADMIN_KEY"):
        try:
            live_example()
        except TransportError as e:
            print(f"\n   Call failed: {e}")
    else:
        print("\nSet ZKIT_SERVICE_URL and ZKIT_ADMIN_KEY to run the live example.")


if __name__ == "__main__":
    main()
