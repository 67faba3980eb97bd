#!/usr/bin/env python3
"""
Validation script for URL Shortener service.
Walks a live service through signup, login, shorten, redirect and the
owner-only delete, using two throwaway accounts.
"""

import sys
import time
import requests
from typing import Optional
from datetime import datetime


class ServiceValidator:
    """Validates URL shortener service functionality."""

    def __init__(self, base_url: str = "http://localhost:8000"):
        self.base_url = base_url.rstrip("/")
        self.session = requests.Session()
        self.test_results = []
        self.run_id = int(time.time())

    def print_header(self, text: str):
        print(f"\n{'='*60}")
        print(f"  {text}")
        print(f"{'='*60}\n")

    def print_test(self, name: str, passed: bool, details: str = ""):
        status = "✅ PASS" if passed else "❌ FAIL"
        self.test_results.append((name, passed))
        print(f"{status} - {name}")
        if details:
            print(f"       {details}")

    def check(self, name: str, response: requests.Response, expected_status: int) -> bool:
        passed = response.status_code == expected_status
        self.print_test(name, passed, f"Status: {response.status_code} (expected {expected_status})")
        return passed

    def auth(self, token: str) -> dict:
        return {"Authorization": f"Bearer {token}"}

    def test_health_check(self) -> bool:
        try:
            response = self.session.get(f"{self.base_url}/api/health", timeout=5)
            data = response.json() if response.status_code == 200 else {}
            healthy = data.get("status") == "healthy"
            self.print_test("Health Check", healthy, f"DB: {data.get('database', 'N/A')}")
            return healthy
        except requests.RequestException as e:
            self.print_test("Health Check", False, f"Error: {str(e)}")
            return False

    def create_user(self, label: str) -> Optional[str]:
        """Sign up and log in; returns a token."""
        email = f"validate-{label}-{self.run_id}@example.com"
        password = f"pw-{self.run_id}"
        signup = self.session.post(
            f"{self.base_url}/users/signup",
            json={"firstname": f"Validator {label}", "email": email, "password": password},
            timeout=5,
        )
        if not self.check(f"Signup {label}", signup, 201):
            return None

        login = self.session.post(
            f"{self.base_url}/users/login",
            json={"email": email, "password": password},
            timeout=5,
        )
        if not self.check(f"Login {label}", login, 200):
            return None
        return login.json()["token"]

    def run_all_tests(self) -> bool:
        """Run all validation tests."""
        self.print_header("URL Shortener Service Validation")
        print(f"Testing service at: {self.base_url}")
        print(f"Timestamp: {datetime.now().isoformat()}\n")

        if not self.test_health_check():
            print("\n❌ Health check failed. Service may not be running.")
            return False

        owner = self.create_user("owner")
        other = self.create_user("other")
        if not owner or not other:
            self.print_summary()
            return False

        print()

        code = f"v{self.run_id}"
        target = f"https://example.com/validate/{self.run_id}"
        created = self.session.post(
            f"{self.base_url}/shorten",
            json={"url": target, "code": code},
            headers=self.auth(owner),
            timeout=5,
        )
        if not self.check("Create Short URL", created, 200):
            self.print_summary()
            return False
        link_id = created.json()["id"]

        self.check("Shorten Without Token", self.session.post(
            f"{self.base_url}/shorten", json={"url": target}, timeout=5), 401)
        self.check("Malformed Authorization Header", self.session.post(
            f"{self.base_url}/shorten", json={"url": target},
            headers={"Authorization": owner}, timeout=5), 400)
        self.check("Duplicate Code Rejection", self.session.post(
            f"{self.base_url}/shorten", json={"url": "https://different-url.com", "code": code},
            headers=self.auth(other), timeout=5), 409)
        self.check("Invalid URL Rejection", self.session.post(
            f"{self.base_url}/shorten", json={"url": "not-a-valid-url"},
            headers=self.auth(owner), timeout=5), 400)

        print()

        redirect = self.session.get(f"{self.base_url}/{code}", allow_redirects=False, timeout=5)
        self.print_test(
            "URL Redirect",
            redirect.status_code == 302 and redirect.headers.get("Location") == target,
            f"Redirects to: {redirect.headers.get('Location', 'No Location header')}",
        )

        listing = self.session.get(f"{self.base_url}/allCodes", headers=self.auth(owner), timeout=5)
        listed = listing.status_code == 200 and any(c["id"] == link_id for c in listing.json()["codes"])
        self.print_test("List Own Codes", listed, f"Status: {listing.status_code}")

        self.check("Delete By Non-Owner", self.session.delete(
            f"{self.base_url}/{link_id}", headers=self.auth(other), timeout=5), 404)
        self.check("Delete By Owner", self.session.delete(
            f"{self.base_url}/{link_id}", headers=self.auth(owner), timeout=5), 200)
        self.check("Redirect After Delete", self.session.get(
            f"{self.base_url}/{code}", allow_redirects=False, timeout=5), 404)

        self.print_summary()
        return all(passed for _, passed in self.test_results)

    def print_summary(self):
        total = len(self.test_results)
        passed = sum(1 for _, p in self.test_results if p)
        failed = total - passed

        self.print_header("Test Summary")
        print(f"Total Tests:  {total}")
        print(f"✅ Passed:     {passed}")
        print(f"❌ Failed:     {failed}")
        if total:
            print(f"Success Rate: {(passed/total*100):.1f}%")

        if failed > 0:
            print("\n⚠️  Failed tests:")
            for name, ok in self.test_results:
                if not ok:
                    print(f"   - {name}")

        print()


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Validate URL Shortener service functionality"
    )
    parser.add_argument(
        "--url",
        default="http://localhost:8000",
        help="Base URL of the service (default: http://localhost:8000)"
    )

    args = parser.parse_args()

    validator = ServiceValidator(args.url)

    try:
        success = validator.run_all_tests()
        sys.exit(0 if success else 1)
    except KeyboardInterrupt:
        print("\n\n⚠️  Validation interrupted by user")
        sys.exit(2)
    except requests.RequestException as e:
        print(f"\n\n❌ Validation failed with error: {str(e)}")
        sys.exit(3)


if __name__ == "__main__":
    main()
