#!/usr/bin/env python3
import json
import sys
from urllib import request, error

# サーバーは ENABLE_DEBUG_ROUTES=true で起動しておく（/api/debug を使う）
BASE_URL = "http://127.0.0.1:8000"


def api(method, path, body=None):
    url = BASE_URL + path
    data = None
    headers = {}
    if body is not None:
        data = json.dumps(body).encode("utf-8")
        headers["Content-Type"] = "application/json"
    req = request.Request(url, data=data, headers=headers, method=method)
    try:
        with request.urlopen(req, timeout=10) as resp:
            payload = resp.read().decode("utf-8")
            return resp.status, json.loads(payload) if payload else None
    except error.HTTPError as e:
        payload = e.read().decode("utf-8")
        try:
            return e.code, json.loads(payload)
        except ValueError:
            return e.code, {"detail": payload}
    except OSError as e:
        return 0, {"detail": str(e)}


def must_ok(status, data, label):
    if status < 200 or status >= 300:
        raise RuntimeError(f"{label} failed: {status} {data}")
    return data


def must_fail(status, data, expected, label):
    if status != expected:
        raise RuntimeError(f"{label}: expected {expected}, got {status} {data}")
    return data


def reset_and_seed(names):
    status, data = api(
        "POST",
        "/api/debug/reset_and_seed",
        {"player_names": names, "submit_facts": True},
    )
    return must_ok(status, data, "reset_and_seed")


def guess(room_id, guesser_id, target_id, chosen):
    return api(
        "POST",
        f"/api/rooms/{room_id}/guesses",
        {"guesser_id": guesser_id, "target_id": target_id, "chosen_fact": chosen},
    )


def case_everyone_guesses_everyone(count):
    seed = reset_and_seed([f"P{i+1}" for i in range(count)])
    room_id = seed["room_id"]
    players = seed["players"]

    for g in players:
        for t in players:
            if g["id"] == t["id"]:
                status, data = guess(room_id, g["id"], t["id"], t["facts"][2])
                must_fail(status, data, 400, "self guess")
                continue
            # 偶数番目は嘘を当て、奇数番目は外す
            chosen = t["facts"][2] if players.index(t) % 2 == 0 else t["facts"][0]
            status, data = guess(room_id, g["id"], t["id"], chosen)
            must_ok(status, data, "guess")
            status, data = guess(room_id, g["id"], t["id"], chosen)
            must_fail(status, data, 409, "duplicate guess")

    for p in players:
        status, data = api("GET", f"/api/rooms/{room_id}/stats/{p['id']}")
        stats = must_ok(status, data, "stats")
        if stats["total"] != count - 1:
            raise RuntimeError(f"unexpected total for {p['id']}: {stats}")
    print(f"players={count} everyone guessed ok")


def case_leave_and_rejoin():
    seed = reset_and_seed(["A", "B"])
    room_id = seed["room_id"]
    b = seed["players"][1]["id"]

    status, data = api("POST", f"/api/rooms/{room_id}/leave", {"player_id": b})
    must_ok(status, data, "leave")
    status, data = api("GET", f"/api/players/{b}/rooms")
    if must_ok(status, data, "rooms after leave"):
        raise RuntimeError("room still listed after leave")

    status, data = api("POST", f"/api/rooms/{room_id}/join", {"player_id": b})
    must_ok(status, data, "rejoin")
    status, data = api("GET", f"/api/players/{b}/rooms")
    if [r["id"] for r in must_ok(status, data, "rooms after rejoin")] != [room_id]:
        raise RuntimeError("room missing after rejoin")
    print("leave / rejoin ok")


def main():
    for count in range(2, 7):
        case_everyone_guesses_everyone(count)
    case_leave_and_rejoin()

    print("\nALL OK")
    return 0


if __name__ == "__main__":
    sys.exit(main())
