"""Example: in-process relay with a filtered subscriber and a late joiner (no HTTP)."""

import logging

from msgrelay import DefaultSubscriber, FilterPredicate, MessageRelay, VersionConflict

logging.basicConfig(level=logging.INFO)


def main() -> None:
    relay = MessageRelay()

    orders = DefaultSubscriber(FilterPredicate(starts_with=("order.",)), subscriber_id="orders")
    relay.subscribe(orders)

    relay.publish("order.201", 1, {"status": "placed"})
    relay.publish("user.101", 1, {"event": "signup"})
    relay.publish("order.201", 2, {"status": "shipped"})
    try:
        relay.publish("order.201", 2, {"status": "lost"})
    except VersionConflict as e:
        print(f"rejected: expected version {e.expected}, got {e.declared}")

    late = DefaultSubscriber(subscriber_id="late")
    relay.subscribe(late)

    print("orders saw:", "".join(orders.frames), sep="\n")
    print("late joiner replay:", "".join(late.frames), sep="\n")
    print("snapshot:", relay.snapshot_body())

    relay.unsubscribe(orders)
    relay.unsubscribe(late)


if __name__ == "__main__":
    main()
