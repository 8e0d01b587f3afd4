import requests
import sys
import uuid

BASE_URL = "http://localhost:8000"

def check_health():
    print("Testing Health Check...")
    try:
        resp = requests.get(f"{BASE_URL}/health")
        assert resp.status_code == 200
        print(f"✅ Health Check Passed: {resp.json()}")
    except Exception as e:
        print(f"❌ Health Check Failed: {e}")
        sys.exit(1)

def check_signup_and_signin():
    print("\nTesting Signup / Signin...")
    email = f"smoke_{uuid.uuid4().hex[:8]}@efportal.com"
    user_data = {
        "name": "Smoke Test",
        "email": email,
        "password": "SmokePass123!",
        "income": 10000
    }
    resp = requests.post(f"{BASE_URL}/api/signup", json=user_data)
    if resp.status_code != 201:
        print(f"❌ Signup Failed: {resp.text}")
        return None
    print("✅ Signup Passed")

    resp = requests.post(f"{BASE_URL}/api/signup", json=user_data)
    assert resp.status_code == 400
    print("✅ Duplicate Email Rejected")

    resp = requests.post(f"{BASE_URL}/api/signin", json={"email": email, "password": user_data["password"]})
    if resp.status_code != 200:
        print(f"❌ Signin Failed: {resp.text}")
        return None
    print("✅ Signin Passed")
    return {"Authorization": f"Bearer {resp.json()['token']}"}

def check_loans(headers):
    print("\nTesting Loans...")
    resp = requests.post(f"{BASE_URL}/api/user/take-loan", json={"amount": 30000}, headers=headers)
    if resp.status_code != 201:
        print(f"❌ Take Loan Failed: {resp.text}")
        return
    print(f"💰 New Balance: {resp.json()['newBalance']}")
    assert float(resp.json()["newBalance"]) == 80000.0
    print("✅ Take Loan Passed")

    resp = requests.post(f"{BASE_URL}/api/user/take-loan", json={"amount": 30001}, headers=headers)
    assert resp.status_code == 400
    print(f"✅ Ceiling Enforced: {resp.json()['message']}")

    resp = requests.get(f"{BASE_URL}/api/user/loans", headers=headers)
    assert resp.status_code == 200
    assert len(resp.json()["loans"]) == 1
    print("✅ Loan History Passed")

def check_auth_required():
    print("\nTesting Auth Gate...")
    resp = requests.get(f"{BASE_URL}/api/user")
    assert resp.status_code == 401
    resp = requests.get(f"{BASE_URL}/api/user", headers={"Authorization": "Bearer garbage"})
    assert resp.status_code == 401
    print("✅ Unauthenticated Requests Rejected")

if __name__ == "__main__":
    check_health()
    check_auth_required()
    headers = check_signup_and_signin()
    if headers:
        check_loans(headers)

    print("\n🎉 All Smoke Checks Passed!")
