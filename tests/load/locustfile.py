# Module-level imports & constants
from locust import HttpUser, task, between
import os
import random

PRODUCT_IDS = ["1", "2", "3", "4"]
SIZE_IDS = ["small", "medium", "large"]
MATERIAL_IDS = ["canvas", "framed", "paper_glossy", "paper_matte", "metal", "acrylic", "wood"]
COOKIE_NAME = "admin_token"


class ShopperUser(HttpUser):
    """Parcours boutique: tarifs, panier de session, commande démo (sans identifiants PayPal)."""
    wait_time = between(0.5, 2.0)

    def on_start(self):
        self.headers = {"Accept": "application/json"}

    @task(3)
    def browse_pricing(self):
        self.client.get("/api/v1/pricing", name="GET /api/v1/pricing", headers=self.headers)

    @task(2)
    def fill_cart(self):
        self.client.post(
            "/api/v1/cart/items",
            json={
                "productId": random.choice(PRODUCT_IDS),
                "sizeId": random.choice(SIZE_IDS),
                "materialId": random.choice(MATERIAL_IDS),
                "quantity": 1,
            },
            name="POST /api/v1/cart/items",
            headers=self.headers,
        )

    @task(1)
    def checkout(self):
        cart = self.client.get("/api/v1/cart", name="GET /api/v1/cart", headers=self.headers).json()
        if not cart.get("items"):
            return
        items = [
            {"productId": i["productId"], "sizeId": i["sizeId"], "materialId": i["materialId"], "quantity": i["quantity"]}
            for i in cart["items"]
        ]
        with self.client.post(
            "/api/paypal/create-order",
            json={"amount": cart["total"], "currency": "USD", "items": items},
            name="POST /api/paypal/create-order",
            headers=self.headers,
            catch_response=True,
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"create-order failed ({resp.status_code}): {resp.text[:200]}")
                return
            order_id = resp.json().get("id")
        # Capture uniquement en mode démo: aucun appel réel au prestataire
        if order_id and order_id.startswith("DEMO-"):
            self.client.post(
                "/api/paypal/capture-order",
                json={"orderId": order_id},
                name="POST /api/paypal/capture-order",
                headers=self.headers,
            )


class AdminUser(HttpUser):
    """Back-office: nécessite LOCUST_ADMIN_EMAIL / LOCUST_ADMIN_PASSWORD (attention au rate limit login)."""
    wait_time = between(1.0, 3.0)
    weight = 1

    def on_start(self):
        email = os.getenv("LOCUST_ADMIN_EMAIL", "").strip()
        password = os.getenv("LOCUST_ADMIN_PASSWORD", "").strip()
        if not email or not password:
            raise RuntimeError("Fournissez LOCUST_ADMIN_EMAIL et LOCUST_ADMIN_PASSWORD pour le profil admin.")
        with self.client.post(
            "/api/auth/login",
            json={"email": email, "password": password},
            name="POST /api/auth/login",
            catch_response=True,
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Login failed ({resp.status_code}): {resp.text[:200]}")
            elif COOKIE_NAME not in resp.cookies:
                resp.failure("Login ok mais cookie admin_token manquant")
            else:
                resp.success()

    @task
    def dashboard(self):
        self.client.get("/admin/dashboard", name="GET /admin/dashboard", allow_redirects=False)
        self.client.get("/admin/orders", name="GET /admin/orders", allow_redirects=False)
