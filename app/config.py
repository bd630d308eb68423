from typing import List, Literal, Optional
from pydantic_settings import BaseSettings
from urllib.parse import quote_plus

class Settings(BaseSettings):
    env: str = "production"

    postgres_user: str = "postgres"
    postgres_password: str = ""
    postgres_db: str = "furnishop"
    postgres_host: str = "localhost"
    postgres_port: str = "5432"
    sqlalchemy_database_url: Optional[str] = None


    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24

    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    # Pricing
    platform_fee: float = 30
    delivery_combine_mode: Literal["SUM", "MAX_PLUS_ADDON"] = "SUM"
    per_additional_paid_item_fee: float = 149
    free_shipping_threshold: float = 25000
    max_delivery_cap: float = 2499
    cod_fee: float = 0
    cod_fee_on_free_shipping: bool = True
    gst_rate: float = 0.18

    # Delivery ETA
    cutoff_hour_local: int = 14
    skip_weekends: bool = True
    holidays: List[str] = []   # ISO 'YYYY-MM-DD'
    timezone: str = "Asia/Kolkata"

    product_image_path: str = "/uploads/products/"
    category_image_path: str = "/uploads/categories/"

    @property
    def database_url(self):
        if self.sqlalchemy_database_url:
            return self.sqlalchemy_database_url
        encoded_password = quote_plus(self.postgres_password)
        return (
            f"postgresql+psycopg2://{self.postgres_user}:"
            f"{encoded_password}@{self.postgres_host}:"
            f"{self.postgres_port}/{self.postgres_db}"
        )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "allow"

settings = Settings()
