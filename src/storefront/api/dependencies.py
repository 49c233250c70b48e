"""Request dependencies shared by the routers."""

from fastapi import Header, HTTPException


async def current_customer(x_customer_id: str = Header(default="")) -> str:
    """The authenticated customer, as resolved by the upstream auth layer."""
    customer_id = x_customer_id.strip()
    if not customer_id:
        raise HTTPException(status_code=401, detail="Authentication required")
    return customer_id
