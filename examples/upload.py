#!/usr/bin/env python3
"""Upload a form with FormClient against an echo transport (no network)."""
import httpx
from pydantic import BaseModel

from httpform.core.form_client import FormClient
from httpform.core.models import FormData


class Report(BaseModel):
    title: str
    tags: list[str]
    attachment: FormData


def echo(request: httpx.Request) -> httpx.Response:
    return httpx.Response(
        200,
        json={
            "content_type": request.headers["Content-Type"],
            "body": request.content.decode("utf-8", errors="replace"),
        },
    )


def demonstrate_form_client():
    report = Report(
        title="Quarterly numbers",
        tags=["finance", "q3"],
        attachment=FormData(file_name="numbers.csv", data=b"month,total\njuly,42\n"),
    )

    with FormClient(transport=httpx.MockTransport(echo)) as client:
        print("multipart/form-data")
        print("-------------------")
        response = client.post(
            "https://uploads.example.com/reports",
            data=report,
            headers={"Content-Type": "multipart/form-data"},
        )
        print(response.json()["content_type"])
        print(response.json()["body"])

        print("application/x-www-form-urlencoded")
        print("---------------------------------")
        response = client.post(
            "https://uploads.example.com/search",
            data={"q": "numbers & totals", "tags": ["finance", "q3"]},
            headers={"Content-Type": "application/x-www-form-urlencoded; charset=utf-8"},
        )
        print(response.json()["body"])


if __name__ == "__main__":
    demonstrate_form_client()
