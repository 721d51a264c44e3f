"""Trading account routes.

Lookups happen before ownership checks, so an unknown id is a 404 and
someone else's account is a 403. Admins may act on any account.
"""
from fastapi import APIRouter, status

from xtrack.deps import (AccountServiceDep, AdminIdentity, CurrentIdentity,
                         require_path_id)
from xtrack.schemas import (AccountView, AccountWithOwnerView,
                            CreateAccountRequest, Envelope,
                            UpdateAccountRequest)
from xtrack.services.authorization import (ensure_account_access,
                                           ensure_can_create_account_for)

router = APIRouter(prefix="/accounts", tags=["accounts"])

# Route order: /me before /{account_id} so it is not read as an id.


@router.post("", response_model=Envelope[AccountView], status_code=status.HTTP_201_CREATED)
def create_account(
    body: CreateAccountRequest,
    identity: CurrentIdentity,
    accounts: AccountServiceDep,
) -> Envelope[AccountView]:
    """Create an account; non-admins only for themselves."""
    ensure_can_create_account_for(identity, body.user_id)
    account = accounts.create_account(body.user_id, body.name)
    return Envelope(message="Account created successfully", data=AccountView.model_validate(account))


@router.get("", response_model=Envelope[list[AccountWithOwnerView]])
def list_accounts(_: AdminIdentity, accounts: AccountServiceDep) -> Envelope[list[AccountWithOwnerView]]:
    return Envelope(
        message="Accounts retrieved successfully",
        data=[AccountWithOwnerView.model_validate(account) for account in accounts.get_all()],
    )


@router.get("/me", response_model=Envelope[list[AccountView]])
def list_my_accounts(identity: CurrentIdentity, accounts: AccountServiceDep) -> Envelope[list[AccountView]]:
    return Envelope(
        message="Accounts retrieved successfully",
        data=[AccountView.model_validate(account) for account in accounts.get_by_user_id(identity.user_id)],
    )


@router.get("/{account_id}", response_model=Envelope[AccountWithOwnerView])
def get_account(
    account_id: str,
    identity: CurrentIdentity,
    accounts: AccountServiceDep,
) -> Envelope[AccountWithOwnerView]:
    account = accounts.get_with_owner(require_path_id(account_id, "account"))
    ensure_account_access(identity, account)
    return Envelope(
        message="Account retrieved successfully",
        data=AccountWithOwnerView.model_validate(account),
    )


@router.put("/{account_id}", response_model=Envelope[AccountView])
def update_account(
    account_id: str,
    body: UpdateAccountRequest,
    identity: CurrentIdentity,
    accounts: AccountServiceDep,
) -> Envelope[AccountView]:
    account = accounts.get_by_id(require_path_id(account_id, "account"))
    ensure_account_access(identity, account)
    account = accounts.update_account(account.id, body.name)
    return Envelope(message="Account updated successfully", data=AccountView.model_validate(account))


@router.delete("/{account_id}", response_model=Envelope[None])
def delete_account(
    account_id: str,
    identity: CurrentIdentity,
    accounts: AccountServiceDep,
) -> Envelope[None]:
    account = accounts.get_by_id(require_path_id(account_id, "account"))
    ensure_account_access(identity, account)
    accounts.delete(account.id)
    return Envelope(message="Account deleted successfully")


@router.post("/{account_id}/regenerate-token", response_model=Envelope[AccountView])
def regenerate_token(
    account_id: str,
    identity: CurrentIdentity,
    accounts: AccountServiceDep,
) -> Envelope[AccountView]:
    """Issue a new API token; the previous token stops working at once."""
    account = accounts.get_by_id(require_path_id(account_id, "account"))
    ensure_account_access(identity, account)
    account = accounts.regenerate_token(account.id)
    return Envelope(message="Token regenerated successfully", data=AccountView.model_validate(account))
