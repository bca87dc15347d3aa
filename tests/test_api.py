# tests/test_api.py
"""HTTP-level tests: routing, camelCase payloads and the error envelope."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import datetime, timedelta

from conftest import PASSWORD, make_vehicle

CARD = "4111111111111111"


def soon(hours=2):
    return datetime.utcnow() + timedelta(hours=hours)


class TestHealth:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["database"] == "ok"


class TestAuthEndpoints:
    def test_register_login_me_logout(self, client):
        r = client.post("/users/register", json={
            "name": "Ana", "phone": "5551111", "password": "pw",
            "userType": "resident", "unitNumber": "4A",
        })
        assert r.status_code == 200
        user = r.json()["user"]
        assert user["userType"] == "resident"
        assert "passwordHash" not in user

        r = client.post("/login", json={"phone": "5551111", "password": "pw"})
        assert r.status_code == 200
        token = r.json()["token"]
        headers = {"X-Session-Token": token}

        assert client.get("/me", headers=headers).json()["user"]["id"] == user["id"]
        assert client.post("/logout", headers=headers).json() == {"success": True}

        r = client.get("/me", headers=headers)
        assert r.status_code == 401
        assert r.json() == {"success": False, "message": "Not logged in"}

    def test_profile_update_needs_own_session(self, client, resident, visitor):
        r = client.put(f"/users/{resident.id}", json={"password": "taken-over"})
        assert r.status_code == 401
        assert r.json() == {"success": False, "message": "Not logged in"}
        assert client.post("/login", json={"phone": resident.phone, "password": "taken-over"}).status_code == 401

        token = client.post("/login", json={"phone": visitor.phone, "password": PASSWORD}).json()["token"]
        r = client.put(f"/users/{resident.id}", json={"password": "taken-over"},
                       headers={"X-Session-Token": token})
        assert r.status_code == 401

        token = client.post("/login", json={"phone": resident.phone, "password": PASSWORD}).json()["token"]
        r = client.put(f"/users/{resident.id}", json={"name": "Ana B", "password": "new-pass"},
                       headers={"X-Session-Token": token})
        assert r.status_code == 200
        assert r.json()["user"]["name"] == "Ana B"
        assert client.post("/login", json={"phone": resident.phone, "password": "new-pass"}).status_code == 200

    def test_bad_login(self, client, resident):
        r = client.post("/login", json={"phone": resident.phone, "password": "nope"})
        assert r.status_code == 401
        assert r.json() == {"success": False, "message": "Invalid phone number or password"}

    def test_registration_rule_violation(self, client):
        r = client.post("/users/register", json={
            "name": "Ana", "phone": "5551111", "password": "pw", "userType": "resident",
        })
        assert r.status_code == 400
        assert r.json() == {"success": False, "message": "Resident should have unitNumber"}

    def test_admin_login(self, client, staff):
        r = client.post("/admin/login", json={"staffId": "S-100", "password": PASSWORD})
        assert r.status_code == 200
        assert r.json()["data"]["staffId"] == "S-100"
        assert r.json()["data"]["lotId"] == staff.lot_id


class TestVisitorPassEndpoints:
    def test_issue_pass(self, client, resident):
        r = client.post("/visitorPasses", json={"userId": resident.id, "hours": 8, "visitorPlate": "on-abc 123"})
        assert r.status_code == 200
        body = r.json()
        assert body["success"] is True
        visitor_pass = body["visitorPass"]
        assert visitor_pass["visitorPlate"] == "ON-ABC123"
        assert visitor_pass["status"] == "active"
        assert visitor_pass["passType"] == "8 hour"
        assert visitor_pass["timeRemaining"] in ("8h 0m", "7h 59m")

    def test_quota_exhaustion_uses_error_envelope(self, client, resident):
        payload = {"userId": resident.id, "hours": 48, "visitorPlate": "ON-WKND1"}
        assert client.post("/visitorPasses", json=payload).status_code == 200
        r = client.post("/visitorPasses", json=payload)
        assert r.status_code == 400
        assert r.json() == {"success": False, "message": "No available Weekend passes"}

    def test_unknown_duration(self, client, resident):
        r = client.post("/visitorPasses", json={"userId": resident.id, "hours": 5, "visitorPlate": "ON-A1"})
        assert r.status_code == 400
        assert r.json()["success"] is False

    def test_malformed_body_is_400(self, client, resident):
        r = client.post("/visitorPasses", json={"userId": resident.id, "hours": "lots", "visitorPlate": "ON-A1"})
        assert r.status_code == 400
        assert r.json()["success"] is False
        assert "hours" in r.json()["message"]

    def test_quota_and_history(self, client, resident):
        client.post("/visitorPasses", json={"userId": resident.id, "hours": 24, "visitorPlate": "ON-DAY1"})
        body = client.get(f"/visitorPasses/quota/{resident.id}").json()
        quota = {q["type"]: q["remaining"] for q in body["quota"]}
        assert quota == {"8 hour": 5, "24 hour": 2, "Weekend": 1}
        assert [p["visitorPlate"] for p in body["passHistory"]] == ["ON-DAY1"]

    def test_quota_for_visitor_is_404(self, client, visitor):
        r = client.get(f"/visitorPasses/quota/{visitor.id}")
        assert r.status_code == 404
        assert r.json() == {"success": False, "message": "User does not exist or is not a resident"}


class TestVerificationEndpoint:
    def test_unknown_plate(self, client, lot):
        r = client.get("/verify-vehicle", params={"plate": "xyz999", "region": "on", "lotId": lot.id})
        assert r.status_code == 200
        assert r.json() == {
            "valid": False,
            "reason": "No Valid Visitor Pass",
            "success": False,
            "message": f"No vehicle found with license plate ON-XYZ999 in lot ID {lot.id}",
        }

    def test_parked_vehicle(self, client, db, lot, resident):
        make_vehicle(db, resident, lot, parking_until=soon())
        body = client.get("/verify-vehicle", params={"plate": "ABC123", "region": "ON", "lotId": lot.id}).json()
        assert body["valid"] is True
        assert "reason" not in body
        assert body["vehicle"]["licensePlate"] == "ABC123"

    def test_pass_backed_plate(self, client, lot, resident):
        client.post("/visitorPasses", json={"userId": resident.id, "hours": 8, "visitorPlate": "QC-VIS42"})
        body = client.get("/verify-vehicle", params={"plate": "VIS42", "region": "QC"}).json()
        assert body["valid"] is True
        assert body["visitorPass"]["visitorPlate"] == "QC-VIS42"

    def test_region_required(self, client):
        r = client.get("/verify-vehicle", params={"plate": "ABC123"})
        assert r.status_code == 400
        assert r.json()["success"] is False


class TestTicketAndPaymentEndpoints:
    def test_ticket_then_pay(self, client, lot, resident):
        r = client.post("/violations", json={
            "province": "ON", "licensePlate": "XYZ999", "reason": "No Valid Visitor Pass", "lotId": lot.id,
        })
        assert r.status_code == 200
        ticket_id = r.json()["ticketId"]
        assert client.get(f"/violations/{ticket_id}").json()["violation"]["status"] == "pending"

        r = client.post("/payments", json={
            "amount": 50, "paymentMethod": "credit", "cardNumber": CARD,
            "userId": resident.id, "lotId": lot.id, "ticketId": ticket_id,
        })
        assert r.status_code == 201
        assert r.json()["data"]["amount"] == 50.0
        assert r.json()["data"]["status"] == "completed"

        assert client.get(f"/violations/{ticket_id}").json()["violation"]["status"] == "paid"
        payments = client.get(f"/payments/user/{resident.id}").json()["payments"]
        assert payments[0]["cardNumber"] == "****1111"

        r = client.put(f"/violations/{ticket_id}/status", json={"status": "pending"})
        assert r.status_code == 400

    def test_listing_by_lot(self, client, lot):
        client.post("/violations", json={"province": "ON", "licensePlate": "A1", "reason": "Other", "lotId": lot.id})
        body = client.get("/violations", params={"lotId": lot.id}).json()
        assert [v["licensePlate"] for v in body["violations"]] == ["A1"]

    def test_unknown_ticket(self, client):
        r = client.get("/violations/999")
        assert r.status_code == 404
        assert r.json() == {"success": False, "message": "No violation found with ID 999"}

    def test_payment_for_unknown_user_or_lot(self, client, lot, resident):
        payload = {"amount": 50, "paymentMethod": "credit", "cardNumber": CARD,
                   "userId": 9999, "lotId": lot.id}
        r = client.post("/payments", json=payload)
        assert r.status_code == 404
        assert r.json() == {"success": False, "message": "User does not exist"}

        r = client.post("/payments", json={**payload, "userId": resident.id, "lotId": 777})
        assert r.status_code == 404
        assert client.get("/payments").json()["payments"] == []

    def test_sub_cent_payment_rejected(self, client, resident):
        r = client.post("/payments", json={"amount": 0.004, "paymentMethod": "credit",
                                           "cardNumber": CARD, "userId": resident.id})
        assert r.status_code == 400
        assert r.json()["success"] is False

    def test_verify_and_ticket_failed_plate(self, client, lot):
        r = client.post("/verify-vehicle/ticket", params={"plate": "xyz999", "region": "on", "lotId": lot.id})
        assert r.status_code == 200
        body = r.json()
        assert body["ticketed"] is True
        assert body["reason"] == "No Valid Visitor Pass"
        violation = client.get(f"/violations/{body['ticketId']}").json()["violation"]
        assert violation["status"] == "pending"
        assert violation["licensePlate"] == "XYZ999"

    def test_verify_and_ticket_valid_plate_writes_nothing(self, client, db, lot, resident):
        make_vehicle(db, resident, lot, parking_until=soon())
        body = client.post("/verify-vehicle/ticket",
                           params={"plate": "ABC123", "region": "ON", "lotId": lot.id}).json()
        assert body["valid"] is True
        assert body["ticketed"] is False
        assert client.get("/violations", params={"lotId": lot.id}).json()["violations"] == []

    def test_verify_and_ticket_needs_lot(self, client):
        r = client.post("/verify-vehicle/ticket", params={"plate": "ABC123", "region": "ON"})
        assert r.status_code == 400

    def test_unknown_lot_for_ticket(self, client):
        r = client.post("/violations", json={"province": "ON", "licensePlate": "A1", "reason": "Other", "lotId": 99})
        assert r.status_code == 404


class TestLotAndVehicleEndpoints:
    def test_visitor_registration_shows_in_lot(self, client, lot):
        r = client.post("/visitors/register", json={
            "fullName": "Cara Guest", "phone": "5553333", "unitToVisit": "12B",
            "region": "QC", "licensePlate": "VIS42", "parkingLotId": lot.id,
        })
        assert r.status_code == 200
        assert r.json()["vehicle"]["ownerName"] == "Cara Guest"

        lots = client.get("/parking-lots").json()["parkingLots"]
        assert lots[0]["currentOccupancy"] == 1
        assert lots[0]["currentRemain"] == lot.total_spaces - 1

        vehicles = client.get(f"/parking-lots/{lot.id}/active-vehicles").json()["vehicles"]
        assert vehicles[0]["userType"] == "visitor"

    def test_unknown_lot(self, client):
        assert client.get("/parking-lots/999").status_code == 404
        assert client.get("/parking-lots/999/active-vehicles").status_code == 404

    def test_vehicle_register_and_delete(self, client, lot, resident):
        payload = {"userId": resident.id, "province": "on", "licensePlate": "abc 123",
                   "lotId": lot.id, "parkingUntil": soon().isoformat()}
        assert client.post("/vehicles", json=payload).json()["vehicle"]["licensePlate"] == "ABC123"
        assert client.post("/vehicles", json=payload).status_code == 400
        assert [v["province"] for v in client.get(f"/vehicles/user/{resident.id}").json()["vehicles"]] == ["ON"]

        assert client.delete("/vehicles/ON/ABC123").json()["success"] is True
        assert client.delete("/vehicles/ON/ABC123").status_code == 404

    def test_report(self, client, lot):
        r = client.post("/admin/reports", json={"lotId": lot.id, "type": "daily", "description": "Quiet night"})
        assert r.status_code == 201
        assert r.json()["data"]["type"] == "daily"
