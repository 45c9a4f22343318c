"""
Walkthrough of the Farm2Home functions against an in-memory store.

Shows the triggers reacting to new documents, the callables, and the
retention sweep.
"""

from datetime import timedelta

from functions import build_functions, log_catalog
from shared.collections import (
    NOTIFICATIONS,
    ANALYTICS,
    cart_metadata_path,
    order_path,
    product_path,
    user_path,
    user_preferences_path,
)
from shared.document_store import DocumentStore


def _banner(title: str) -> None:
    print("\n" + "=" * 70)
    print(title)
    print("=" * 70 + "\n")


def run_demo():
    """
    Run every function once.

    1. Seed two products
    2. Create a user (fires onUserCreated)
    3. Create an order (fires onOrderCreated)
    4. Call each callable function
    5. Run the retention sweep with one expired notification
    """
    store = DocumentStore()
    functions = build_functions(store)
    log_catalog(functions)

    _banner("SEED: products")
    store.set(product_path("apples"), {"name": "Apples (1kg)", "stock": 10})
    store.set(product_path("milk"), {"name": "Milk (1L)", "stock": 2})
    for snapshot in store.list_documents("products"):
        print(f"  {snapshot.path}: {snapshot.data}")

    _banner("TRIGGER: new user u-demo")
    store.set(user_path("u-demo"), {"email": "demo@farm2home.test", "displayName": "Demo User"})
    print(f"  preferences: {store.get(user_preferences_path('u-demo')).data}")
    print(f"  cart:        {store.get(cart_metadata_path('u-demo')).data}")
    print(f"  analytics:   {store.count(ANALYTICS)} event(s)")

    _banner("TRIGGER: new order o-demo (milk goes negative, nothing stops it)")
    store.set(order_path("o-demo"), {
        "userId": "u-demo",
        "items": [
            {"productId": "apples", "quantity": 3},
            {"productId": "milk", "quantity": 5},
        ],
        "total": 21.5,
    })
    for snapshot in store.list_documents("products"):
        print(f"  {snapshot.path}: stock={snapshot.get('stock')}")

    _banner("CALLABLE functions")
    calls = [
        ("sayHello", {"name": "Demo User"}),
        ("calculateSum", {"a": 2, "b": 40}),
        ("getServerTime", {}),
        ("sendWelcomeMessage", {"userId": "u-demo", "email": "demo@farm2home.test", "userName": "Demo User"}),
        ("processImage", {"imageUrl": "https://cdn.farm2home.test/apples.jpg", "filter": "enhance"}),
    ]
    for name, data in calls:
        print(f"  {name}: {functions.call(name, data).to_result()}")

    _banner("SCHEDULED: cleanupOldNotifications")
    stale = store.add(NOTIFICATIONS, {"userId": "u-demo", "type": "welcome", "message": "old", "read": True})
    store.update(stale.path, {"createdAt": store.clock() - timedelta(days=45)})
    print(f"  notifications before: {store.count(NOTIFICATIONS)}")
    print(f"  result: {functions.scheduler.run('cleanupOldNotifications').to_result()}")
    print(f"  notifications after:  {store.count(NOTIFICATIONS)}")

    return functions
