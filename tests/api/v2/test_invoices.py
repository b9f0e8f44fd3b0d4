"""
Tests for the invoices API endpoints (/api/v2/invoices).
"""
import json

import pytest
from httpx import AsyncClient

from factories import EstimatePayloadFactory, InvoicePayloadFactory, LineItemFactory

INVOICES_PREFIX = "/api/v2/invoices"
ESTIMATES_PREFIX = "/api/v2/estimates"


async def create_invoice(client: AsyncClient, **overrides) -> dict:
    response = await client.post(f"{INVOICES_PREFIX}/", json=InvoicePayloadFactory(**overrides))
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateInvoice:
    @pytest.mark.asyncio
    async def test_totals_stored_as_given(self, authenticated_client: AsyncClient):
        line_items = [
            LineItemFactory(description="Kitchen", qty=1, unit_price=1000, total_price=1000),
            LineItemFactory(description="Hallway touch-up", qty=1, unit_price=350, total_price=350),
        ]
        invoice = await create_invoice(
            authenticated_client,
            line_items=line_items,
            subtotal=1350,
            tax=229.5,
            total=1579.5,
        )

        assert invoice["number"] == "INV-000001"
        assert invoice["status"] == "DRAFT"
        assert invoice["derived_from_estimate_id"] is None
        assert invoice["subtotal"] == 1350
        assert invoice["tax"] == 229.5
        assert invoice["total"] == 1579.5
        assert invoice["formatted_total"] == "₪1,579.5"
        assert [i["description"] for i in invoice["line_items"]] == ["Kitchen", "Hallway touch-up"]

    @pytest.mark.asyncio
    async def test_default_currency_symbol(self, authenticated_client: AsyncClient):
        payload = InvoicePayloadFactory()
        del payload["currency_symbol"]

        response = await authenticated_client.post(f"{INVOICES_PREFIX}/", json=payload)
        assert response.status_code == 201
        assert response.json()["currency_symbol"] == "₪"

    @pytest.mark.asyncio
    async def test_custom_currency_symbol(self, authenticated_client: AsyncClient):
        invoice = await create_invoice(authenticated_client, currency_symbol="$", subtotal=2000, total=2000)
        assert invoice["formatted_total"] == "$2,000"

    @pytest.mark.asyncio
    async def test_sequential_numbers(self, authenticated_client: AsyncClient):
        first = await create_invoice(authenticated_client)
        second = await create_invoice(authenticated_client)
        assert (first["number"], second["number"]) == ("INV-000001", "INV-000002")

    @pytest.mark.asyncio
    async def test_negative_amount_rejected(self, authenticated_client: AsyncClient):
        payload = InvoicePayloadFactory()
        payload["line_items"][0]["qty"] = -1

        response = await authenticated_client.post(f"{INVOICES_PREFIX}/", json=payload)
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_non_finite_total_rejected(self, authenticated_client: AsyncClient):
        payload = InvoicePayloadFactory()
        payload["total"] = float("inf")

        # json.dumps writes Infinity, which httpx refuses to encode
        response = await authenticated_client.post(
            f"{INVOICES_PREFIX}/",
            content=json.dumps(payload),
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_derived_from_estimate(self, authenticated_client: AsyncClient):
        estimate = (
            await authenticated_client.post(f"{ESTIMATES_PREFIX}/", json=EstimatePayloadFactory())
        ).json()

        invoice = await create_invoice(authenticated_client, derived_from_estimate_id=estimate["id"])
        assert invoice["derived_from_estimate_id"] == estimate["id"]

        estimate = (await authenticated_client.get(f"{ESTIMATES_PREFIX}/{estimate['id']}")).json()
        assert estimate["invoice_id"] == invoice["id"]
        assert estimate["status"] == "DRAFT"

        # The estimate already has its invoice now
        response = await authenticated_client.post(
            f"{INVOICES_PREFIX}/",
            json=InvoicePayloadFactory(derived_from_estimate_id=estimate["id"]),
        )
        assert response.status_code == 409

        # Conversion hands back the linked invoice
        response = await authenticated_client.post(
            f"{ESTIMATES_PREFIX}/{estimate['id']}/convert-to-invoice"
        )
        assert response.json()["id"] == invoice["id"]

    @pytest.mark.asyncio
    async def test_unknown_estimate(self, authenticated_client: AsyncClient):
        response = await authenticated_client.post(
            f"{INVOICES_PREFIX}/",
            json=InvoicePayloadFactory(derived_from_estimate_id="missing"),
        )
        assert response.status_code == 404


class TestInvoiceLifecycle:
    @pytest.mark.asyncio
    async def test_get_and_list(self, authenticated_client: AsyncClient):
        first = await create_invoice(authenticated_client, customer={
            "name": "Zephyrine Qualtrough",
            "phone": "0545550456",
            "email": "riley@example.com",
            "job_address": "48 HaYarkon St, Herzliya",
        })
        second = await create_invoice(authenticated_client)

        response = await authenticated_client.get(f"{INVOICES_PREFIX}/{first['id']}")
        assert response.status_code == 200
        assert response.json()["customer"]["name"] == "Zephyrine Qualtrough"

        data = (await authenticated_client.get(f"{INVOICES_PREFIX}/")).json()
        assert data["total"] == 2
        assert [i["id"] for i in data["items"]] == [second["id"], first["id"]]

        data = (await authenticated_client.get(f"{INVOICES_PREFIX}/", params={"search": "qualtrough"})).json()
        assert [i["id"] for i in data["items"]] == [first["id"]]

    @pytest.mark.asyncio
    async def test_status_overwrite(self, authenticated_client: AsyncClient):
        invoice = await create_invoice(authenticated_client)

        for status in ("SENT", "PAID", "DRAFT", "VOID"):
            response = await authenticated_client.patch(
                f"{INVOICES_PREFIX}/{invoice['id']}/status", json={"status": status}
            )
            assert response.status_code == 200
            assert response.json()["status"] == status

        data = (await authenticated_client.get(f"{INVOICES_PREFIX}/", params={"status": "VOID"})).json()
        assert data["total"] == 1

    @pytest.mark.asyncio
    async def test_delete(self, authenticated_client: AsyncClient):
        invoice = await create_invoice(authenticated_client)

        response = await authenticated_client.delete(f"{INVOICES_PREFIX}/{invoice['id']}")
        assert response.status_code == 204

        response = await authenticated_client.get(f"{INVOICES_PREFIX}/{invoice['id']}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_requires_auth(self, client: AsyncClient):
        response = await client.get(f"{INVOICES_PREFIX}/")
        assert response.status_code == 401
