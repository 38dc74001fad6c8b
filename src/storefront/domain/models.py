from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional

from ..errors import ValidationError
from .links import FALLBACK_COMPANY, company_name, product_title_from_link

DEFAULT_COMPANY = FALLBACK_COMPANY


@dataclass(frozen=True)
class CompanyInfo:
    company: str
    logo: str
    title: str
    description: str

    @classmethod
    def default(cls) -> "CompanyInfo":
        return cls(company=DEFAULT_COMPANY, logo="", title="", description="")

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


DEFAULT_COMPANY_INFO = CompanyInfo.default()


@dataclass(frozen=True)
class Product:
    id: int
    name: str
    price: int  # KRW
    seller: str
    image_url: str
    link: str = ""

    @classmethod
    def from_json(cls, raw: Mapping[str, Any]) -> "Product":
        """Build a Product from the product source's camelCase JSON.

        Raises ValueError when the id is not an integer.
        """
        raw_id = raw.get("id")
        if isinstance(raw_id, bool) or not isinstance(raw_id, (int, str)):
            raise ValueError(f"invalid product id {raw_id!r}")
        try:
            product_id = int(raw_id)
        except ValueError as e:
            raise ValueError(f"invalid product id {raw_id!r}") from e
        try:
            price = int(raw.get("price") or 0)
        except (TypeError, ValueError):
            price = 0
        return cls(
            id=product_id,
            name=str(raw.get("name") or ""),
            price=max(price, 0),
            seller=str(raw.get("seller") or ""),
            image_url=str(raw.get("imageUrl") or ""),
        )


@dataclass(frozen=True)
class ProductDraft:
    """Input of the product-creation form."""

    name: str
    price: int
    seller: str
    image_url: str = ""

    @classmethod
    def from_form(cls, data: Mapping[str, Any]) -> "ProductDraft":
        name = str(data.get("name") or "").strip()
        seller = str(data.get("seller") or "").strip()
        raw_price = str(data.get("price") if data.get("price") is not None else "").strip()
        image_url = str(data.get("imageUrl") or "").strip()

        if not name:
            raise ValidationError("상품명을 입력하세요")
        if not raw_price:
            raise ValidationError("가격을 입력하세요")
        if not seller:
            raise ValidationError("판매자명을 입력하세요")
        try:
            price = int(raw_price)
        except ValueError as exc:
            raise ValidationError("가격은 숫자로 입력하세요") from exc
        if price < 0:
            raise ValidationError("가격은 0 이상이어야 합니다")
        return cls(name=name, price=price, seller=seller, image_url=image_url)

    def to_json(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "price": self.price,
            "seller": self.seller,
            "imageUrl": self.image_url,
        }


@dataclass(frozen=True)
class ProductView:
    """Display record: a product merged with its link metadata."""

    id: int
    name: str
    price: int
    price_label: str
    seller: str
    image_url: str
    link: str
    company: str
    logo: str
    title: str
    description: str

    def to_json(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "priceLabel": self.price_label,
            "seller": self.seller,
            "imageUrl": self.image_url,
            "link": self.link,
            "company": self.company,
            "logo": self.logo,
            "title": self.title,
            "description": self.description,
        }


def format_price(price: int) -> str:
    return f"₩{price:,}"


def build_view(product: Product, info: Optional[CompanyInfo]) -> ProductView:
    info = info or DEFAULT_COMPANY_INFO
    # placeholder company from a failed lookup yields to the product seller
    publisher = "" if info.company == DEFAULT_COMPANY else info.company
    return ProductView(
        id=product.id,
        name=product.name,
        price=product.price,
        price_label=format_price(product.price),
        seller=product.seller,
        image_url=product.image_url,
        link=product.link,
        company=company_name(publisher, product.seller),
        logo=info.logo,
        title=info.title or product_title_from_link(product.link, product.name),
        description=info.description,
    )
