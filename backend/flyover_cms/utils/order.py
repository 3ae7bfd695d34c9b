from pymongo import ASCENDING
from pymongo.collection import Collection


def compact_order(collection: Collection, query=None, order_field="order", now=None):
    """
    Re-assigns sequential order values (1..N) for a scoped query.
    Each document is written separately; there is no cross-document atomicity.
    """
    docs = list(
        collection.find(query or {}, {order_field: 1})
        .sort([(order_field, ASCENDING), ("_id", ASCENDING)])
    )

    for index, doc in enumerate(docs, start=1):
        if doc.get(order_field) != index:
            changes = {order_field: index}
            if now is not None:
                changes["updatedAt"] = now
            collection.update_one({"_id": doc["_id"]}, {"$set": changes})

    return len(docs)
