#!/usr/bin/env python3
"""
Validation script for the linkdash service.
Exercises a live running service: create, list, update, ownership checks,
redirect and delete.

Usage:
    AUTH_SECRET=... python validate_service.py --base-url http://localhost:9200
"""

import argparse
import os
import sys
import time
from typing import Optional

import requests

# Add parent directories to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from linkdash.identity import issue_token


class ServiceValidator:
    """Validates linkdash service functionality."""
    
    def __init__(self, base_url: str, secret: str):
        self.base_url = base_url.rstrip("/")
        self.session = requests.Session()
        self.test_results = []
        run_id = int(time.time())
        self.owner_token = issue_token(f"validator-{run_id}", secret)
        self.other_token = issue_token(f"intruder-{run_id}", secret)
    
    def _auth(self, token: str) -> dict:
        return {"Authorization": f"Bearer {token}"}
    
    def print_header(self, text: str):
        print(f"\n{'='*60}")
        print(f"  {text}")
        print(f"{'='*60}\n")
    
    def print_test(self, name: str, passed: bool, details: str = ""):
        status = "PASS" if passed else "FAIL"
        self.test_results.append((name, passed))
        print(f"{status} - {name}")
        if details:
            print(f"       {details}")
    
    def test_health_check(self) -> bool:
        try:
            response = self.session.get(f"{self.base_url}/api/health", timeout=5)
            data = response.json()
            healthy = response.status_code == 200 and data.get("status") == "healthy"
            self.print_test("Health Check", healthy, f"DB: {data.get('database')}")
            return healthy
        except requests.RequestException as e:
            self.print_test("Health Check", False, f"Error: {e}")
            return False
    
    def test_requires_auth(self) -> bool:
        response = self.session.post(
            f"{self.base_url}/api/links", json={"url": "https://example.com"}, timeout=5
        )
        passed = response.status_code == 401
        self.print_test("Anonymous create rejected", passed, f"Status: {response.status_code}")
        return passed
    
    def test_create_link(self) -> Optional[dict]:
        response = self.session.post(
            f"{self.base_url}/api/links",
            json={"url": f"https://example.com/validate/{int(time.time())}"},
            headers=self._auth(self.owner_token),
            timeout=5,
        )
        if response.status_code == 201:
            link = response.json()["value"]
            self.print_test("Create Link", True, f"Code: {link['code']}, URL: {link['short_url']}")
            return link
        self.print_test("Create Link", False, f"Status: {response.status_code}")
        return None
    
    def test_list_links(self, link: dict) -> bool:
        response = self.session.get(
            f"{self.base_url}/api/links", headers=self._auth(self.owner_token), timeout=5
        )
        codes = [item["code"] for item in response.json().get("items", [])]
        passed = response.status_code == 200 and link["code"] in codes
        self.print_test("List Links", passed, f"{len(codes)} link(s)")
        return passed
    
    def test_foreign_update_forbidden(self, link: dict) -> bool:
        response = self.session.put(
            f"{self.base_url}/api/links/{link['id']}",
            json={"url": "https://example.com/hijack"},
            headers=self._auth(self.other_token),
            timeout=5,
        )
        passed = response.status_code == 403
        self.print_test("Foreign update forbidden", passed, f"Status: {response.status_code}")
        return passed
    
    def test_update_link(self, link: dict) -> bool:
        response = self.session.put(
            f"{self.base_url}/api/links/{link['id']}",
            json={"url": "https://example.com/updated", "code": link["code"]},
            headers=self._auth(self.owner_token),
            timeout=5,
        )
        passed = response.status_code == 200 and response.json()["value"]["target_url"].endswith("/updated")
        self.print_test("Update Link", passed, f"Status: {response.status_code}")
        return passed
    
    def test_redirect(self, link: dict) -> bool:
        response = self.session.get(
            f"{self.base_url}/{link['code']}", allow_redirects=False, timeout=5
        )
        location = response.headers.get("Location", "")
        passed = response.status_code == 302 and location.endswith("/updated")
        self.print_test("Redirect", passed, f"Redirects to: {location}")
        return passed
    
    def test_delete_link(self, link: dict) -> bool:
        response = self.session.delete(
            f"{self.base_url}/api/links/{link['id']}",
            headers=self._auth(self.owner_token),
            timeout=5,
        )
        gone = self.session.get(f"{self.base_url}/api/resolve/{link['code']}", timeout=5)
        passed = response.status_code == 200 and gone.status_code == 404
        self.print_test("Delete Link", passed, f"Status: {response.status_code}")
        return passed
    
    def run(self) -> int:
        self.print_header(f"Validating linkdash at {self.base_url}")
        
        if not self.test_health_check():
            return 1
        self.test_requires_auth()
        
        link = self.test_create_link()
        if link:
            self.test_list_links(link)
            self.test_foreign_update_forbidden(link)
            self.test_update_link(link)
            self.test_redirect(link)
            self.test_delete_link(link)
        
        passed = sum(1 for _, ok in self.test_results if ok)
        self.print_header(f"{passed}/{len(self.test_results)} checks passed")
        return 0 if passed == len(self.test_results) else 1


def main() -> int:
    parser = argparse.ArgumentParser(description="Validate a running linkdash service")
    parser.add_argument("--base-url", default=os.getenv("BASE_URL", "http://localhost:9200"))
    parser.add_argument("--secret", default=os.getenv("AUTH_SECRET", "change-me"))
    args = parser.parse_args()
    
    return ServiceValidator(args.base_url, args.secret).run()


if __name__ == "__main__":
    sys.exit(main())
