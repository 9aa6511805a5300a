import asyncio
import httpx
import websockets
import json
import logging

import os

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

BASE_URL = os.getenv("BASE_URL", "http://localhost:8000")
WS_URL = os.getenv("WS_URL", "ws://localhost:8000")


async def create_room(client):
    try:
        resp = await client.post(f"{BASE_URL}/api/room")
        if resp.status_code == 200:
            data = resp.json()
            logger.info(f"Room code: {data['roomId']} ({data['shareLink']})")
            return data["roomId"]
        logger.error(f"Failed to create room: {resp.status_code} {resp.text}")
        return None
    except Exception as e:
        logger.error(f"Request Error (Create Room): {e}")
        return None


async def participant(name, language, room_id, event_queue, ready):
    logger.info(f"Connecting {name} ({language}) to {WS_URL}/ws")
    try:
        async with websockets.connect(f"{WS_URL}/ws") as ws:
            connected = json.loads(await ws.recv())
            logger.info(f"[{name}] Connected as {connected['connectionId']}")

            await ws.send(json.dumps({
                "type": "join-room",
                "roomId": room_id,
                "displayName": name,
                "language": language,
            }))
            ready.set()

            # Keep alive and listen; queued sends go out from the other side
            async def sender():
                while True:
                    outgoing = await event_queue["out"].get()
                    await ws.send(json.dumps(outgoing))

            send_task = asyncio.create_task(sender())
            try:
                async for msg in ws:
                    data = json.loads(msg)
                    logger.info(f"[{name}] WS Message: {data['type']}")
                    await event_queue["in"].put(data)
            finally:
                send_task.cancel()

    except Exception as e:
        logger.error(f"Participant Error ({name}): {e}")


async def wait_for(queue, msg_type, timeout=15.0):
    while True:
        event = await asyncio.wait_for(queue.get(), timeout=timeout)
        if event["type"] == msg_type:
            return event


async def run_scenario():
    async with httpx.AsyncClient() as client:
        # 1. Get a room code
        room_id = await create_room(client)
        if not room_id:
            return

        # 2. Alice (en) and Bob (es) join
        alice = {"in": asyncio.Queue(), "out": asyncio.Queue()}
        bob = {"in": asyncio.Queue(), "out": asyncio.Queue()}
        alice_ready, bob_ready = asyncio.Event(), asyncio.Event()

        task_a = asyncio.create_task(participant("Alice", "en", room_id, alice, alice_ready))
        await alice_ready.wait()
        await wait_for(alice["in"], "room-joined")

        task_b = asyncio.create_task(participant("Bob", "es", room_id, bob, bob_ready))
        await bob_ready.wait()
        await wait_for(bob["in"], "room-joined")

        joined = await wait_for(alice["in"], "user-joined")
        logger.info(f"SUCCESS: Alice saw {joined['displayName']} join")

        # 3. Room info
        resp = await client.get(f"{BASE_URL}/api/room/{room_id}")
        logger.info(f"Room info: {resp.json()}")

        # 4. Alice speaks, Bob receives Spanish
        await alice["out"].put({"type": "live-speech", "text": "Hello, how are you?"})
        try:
            event = await wait_for(bob["in"], "live-translation")
            if event.get("error"):
                logger.warning(f"Bob received untranslated text: {event['translatedText']} ({event['error']})")
            else:
                logger.info(f"SUCCESS: Bob received '{event['translatedText']}'")
        except asyncio.TimeoutError:
            logger.error("FAILED: Timeout waiting for live-translation.")

        # 5. Bob leaves, Alice is told
        task_b.cancel()
        try:
            left = await wait_for(alice["in"], "user-left", timeout=5.0)
            logger.info(f"SUCCESS: Alice saw {left['displayName']} leave")
        except asyncio.TimeoutError:
            logger.error("FAILED: Timeout waiting for user-left.")

        task_a.cancel()

if __name__ == "__main__":
    asyncio.run(run_scenario())
