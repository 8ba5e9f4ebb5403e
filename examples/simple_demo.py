#!/usr/bin/env python3
"""
Simple demo of the agentbus message store.

Two agents post to a shared topic, then one catches up by index and the
other by timestamp.
"""

import tempfile
from pathlib import Path

from agentbus.broker.store import MessageStore
from agentbus.core.errors import AgentBusError


def main():
    print("=" * 60)
    print("agentbus - Simple Send/Read Demo")
    print("=" * 60)
    
    with tempfile.TemporaryDirectory() as tmpdir:
        store = MessageStore(data_dir=Path(tmpdir) / "messages")
        print(f"\n[1] Store created under {store.data_dir}")
        
        print("\n[2] Sending messages to 'planning'...")
        first = None
        for i, handle in enumerate(["alice", "bob", "alice", "bob"]):
            result = store.send_message(
                handle=handle,
                body=f"Message #{i} from {handle}",
                signature="~",
                topic="planning",
            )
            first = first or result
            print(f"  ✅ Sent message {i}: index={result.index}, timestamp={result.timestamp}")
        
        print("\n[3] Catching up from index 2...")
        for record in store.read_from(2, topic="planning"):
            print(f"  {record.handle}: {record.body}")
        
        print("\n[4] Reading since the first timestamp...")
        records = store.read_since(first.timestamp, topic="planning")
        print(f"  ✅ {len(records)} messages at or after {first.timestamp}")
        
        print("\n[5] Error handling...")
        try:
            store.read_from(99, topic="planning")
        except AgentBusError as e:
            print(f"  ⚠️  {e.code}: {e}")
        
        listing = store.get_topics()
        print(f"\n[6] Topics: {listing.topics} (count={listing.count})")
    
    print("\n" + "=" * 60)
    print("Demo completed successfully!")
    print("=" * 60)


if __name__ == '__main__':
    try:
        main()
    except KeyboardInterrupt:
        print("\n\nDemo interrupted by user")
