"""Command-line client for a running X-Track API.

Usage:
  xtrack-client health
  xtrack-client login admin admin123
  xtrack-client --token <session> accounts me
  xtrack-client --token <session> accounts create 2 "Main account"
  xtrack-client --api-token <api token> ingest 2024-01-15T10:30:00Z 150.5 12 10150.5
  xtrack-client --token <session> statistics today 1
  xtrack-client --token <session> statistics range 1 2024-01-01 2024-01-31 --page 2

The session token can also come from XTRACK_TOKEN, the API token from XTRACK_API_TOKEN.
"""
import argparse
import json
import os
import sys

import httpx


def print_json(data: object) -> None:
    print(json.dumps(data, indent=2, default=str))


def _show(response: httpx.Response) -> int:
    response.raise_for_status()
    print_json(response.json())
    return 0


def cmd_health(client: httpx.Client, _: argparse.Namespace) -> int:
    return _show(client.get("/health"))


def cmd_login(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.post("/api/auth/login", json={"username": args.username, "password": args.password})
    r.raise_for_status()
    data = r.json()["data"]
    if args.quiet:
        print(data["token"])
    else:
        print_json(data)
    return 0


def cmd_users_list(client: httpx.Client, _: argparse.Namespace) -> int:
    return _show(client.get("/api/users"))


def cmd_users_create(client: httpx.Client, args: argparse.Namespace) -> int:
    body = {"username": args.username, "password": args.password, "role": args.role}
    return _show(client.post("/api/users", json=body))


def cmd_users_delete(client: httpx.Client, args: argparse.Namespace) -> int:
    return _show(client.delete(f"/api/users/{args.user_id}"))


def cmd_accounts_list(client: httpx.Client, _: argparse.Namespace) -> int:
    return _show(client.get("/api/accounts"))


def cmd_accounts_me(client: httpx.Client, _: argparse.Namespace) -> int:
    return _show(client.get("/api/accounts/me"))


def cmd_accounts_create(client: httpx.Client, args: argparse.Namespace) -> int:
    return _show(client.post("/api/accounts", json={"user_id": args.user_id, "name": args.name}))


def cmd_accounts_regenerate(client: httpx.Client, args: argparse.Namespace) -> int:
    return _show(client.post(f"/api/accounts/{args.account_id}/regenerate-token"))


def cmd_ingest(client: httpx.Client, args: argparse.Namespace) -> int:
    body = {
        "timestamp": args.timestamp,
        "daily_profit_loss": args.daily_profit_loss,
        "total_trades_today": args.total_trades_today,
        "total_balance": args.total_balance,
    }
    return _show(client.post("/api/ingest/statistics", json=body))


def _page_params(args: argparse.Namespace) -> dict[str, int]:
    params = {}
    if args.page:
        params["page"] = args.page
    if args.page_size:
        params["page_size"] = args.page_size
    return params


def cmd_statistics_list(client: httpx.Client, args: argparse.Namespace) -> int:
    return _show(client.get(f"/api/statistics/{args.account_id}", params=_page_params(args)))


def cmd_statistics_range(client: httpx.Client, args: argparse.Namespace) -> int:
    params = {"start_date": args.start_date, "end_date": args.end_date, **_page_params(args)}
    return _show(client.get(f"/api/statistics/{args.account_id}/range", params=params))


def cmd_statistics_today(client: httpx.Client, args: argparse.Namespace) -> int:
    return _show(client.get(f"/api/statistics/{args.account_id}/today"))


def cmd_statistics_summary(client: httpx.Client, args: argparse.Namespace) -> int:
    return _show(client.get(f"/api/statistics/{args.account_id}/summary"))


def _headers(args: argparse.Namespace) -> dict[str, str]:
    headers = {}
    if args.token:
        headers["Authorization"] = f"Bearer {args.token}"
    if args.api_token:
        headers["X-API-Token"] = args.api_token
    return headers


def _add_paging(p: argparse.ArgumentParser) -> None:
    p.add_argument("--page", type=int, default=0, help="Page number (default: server default)")
    p.add_argument("--page-size", type=int, default=0, help="Page size (default: server default)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Talk to a running X-Track API.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--base-url",
        default=os.environ.get("XTRACK_URL", "http://localhost:8080"),
        help="API base URL (default: http://localhost:8080)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Request timeout in seconds (default: 30)",
    )
    parser.add_argument("--token", default=os.environ.get("XTRACK_TOKEN"), help="Session token")
    parser.add_argument("--api-token", default=os.environ.get("XTRACK_API_TOKEN"), help="Account API token")
    subparsers = parser.add_subparsers(dest="command", required=True, help="Command")

    subparsers.add_parser("health", help="GET /health")

    p = subparsers.add_parser("login", help="POST /api/auth/login")
    p.add_argument("username")
    p.add_argument("password")
    p.add_argument("-q", "--quiet", action="store_true", help="Print only the session token")

    # users
    users = subparsers.add_parser("users", help="User routes (/api/users, admin)")
    users_sub = users.add_subparsers(dest="users_cmd", required=True)
    users_sub.add_parser("list", help="GET /api/users")
    p = users_sub.add_parser("create", help="POST /api/users")
    p.add_argument("username")
    p.add_argument("password")
    p.add_argument("--role", choices=["admin", "user"], default="user")
    p = users_sub.add_parser("delete", help="DELETE /api/users/{id}")
    p.add_argument("user_id", type=int)

    # accounts
    accounts = subparsers.add_parser("accounts", help="Account routes (/api/accounts)")
    accounts_sub = accounts.add_subparsers(dest="accounts_cmd", required=True)
    accounts_sub.add_parser("list", help="GET /api/accounts (admin)")
    accounts_sub.add_parser("me", help="GET /api/accounts/me")
    p = accounts_sub.add_parser("create", help="POST /api/accounts")
    p.add_argument("user_id", type=int)
    p.add_argument("name")
    p = accounts_sub.add_parser("regenerate-token", help="POST /api/accounts/{id}/regenerate-token")
    p.add_argument("account_id", type=int)

    # ingest
    p = subparsers.add_parser("ingest", help="POST /api/ingest/statistics (needs --api-token)")
    p.add_argument("timestamp", help="RFC3339 time, e.g. 2024-01-15T10:30:00Z")
    p.add_argument("daily_profit_loss", type=float)
    p.add_argument("total_trades_today", type=int)
    p.add_argument("total_balance", type=float)

    # statistics
    statistics = subparsers.add_parser("statistics", help="Statistic routes (/api/statistics)")
    statistics_sub = statistics.add_subparsers(dest="statistics_cmd", required=True)
    p = statistics_sub.add_parser("list", help="GET /api/statistics/{account_id}")
    p.add_argument("account_id", type=int)
    _add_paging(p)
    p = statistics_sub.add_parser("range", help="GET /api/statistics/{account_id}/range")
    p.add_argument("account_id", type=int)
    p.add_argument("start_date", help="YYYY-MM-DD")
    p.add_argument("end_date", help="YYYY-MM-DD (inclusive)")
    _add_paging(p)
    p = statistics_sub.add_parser("today", help="GET /api/statistics/{account_id}/today")
    p.add_argument("account_id", type=int)
    p = statistics_sub.add_parser("summary", help="GET /api/statistics/{account_id}/summary")
    p.add_argument("account_id", type=int)

    return parser


HANDLERS = {
    "health": cmd_health,
    "login": cmd_login,
    "ingest": cmd_ingest,
    "users": {
        "list": cmd_users_list,
        "create": cmd_users_create,
        "delete": cmd_users_delete,
    },
    "accounts": {
        "list": cmd_accounts_list,
        "me": cmd_accounts_me,
        "create": cmd_accounts_create,
        "regenerate-token": cmd_accounts_regenerate,
    },
    "statistics": {
        "list": cmd_statistics_list,
        "range": cmd_statistics_range,
        "today": cmd_statistics_today,
        "summary": cmd_statistics_summary,
    },
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    handler = HANDLERS[args.command]
    if isinstance(handler, dict):
        handler = handler[getattr(args, f"{args.command}_cmd")]

    try:
        with httpx.Client(
            base_url=args.base_url.rstrip("/"),
            timeout=args.timeout,
            headers=_headers(args),
        ) as client:
            return handler(client, args)
    except httpx.HTTPStatusError as e:
        print(f"HTTP error: {e.response.status_code}", file=sys.stderr)
        if e.response.content:
            try:
                print(e.response.json().get("message"), file=sys.stderr)
            except ValueError:
                print(e.response.text, file=sys.stderr)
        return 1
    except httpx.RequestError as e:
        print(f"Request error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
