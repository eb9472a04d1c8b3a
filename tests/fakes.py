"""In-memory node used in place of LogFetcher in tests."""

from web3 import Web3

from goal_indexer.models.types import EventName
from goal_indexer.services.blockchain import RawLogEvent
from goal_indexer.utils.exceptions import SourceUnavailable

FACTORY = Web3.to_checksum_address("0x" + "fa" * 20)
OWNER = Web3.to_checksum_address("0x" + "0e" * 20)
STRATEGY = Web3.to_checksum_address("0x" + "5e" * 20)
VAULT_A = Web3.to_checksum_address("0x" + "a1" * 20)
VAULT_B = Web3.to_checksum_address("0x" + "b2" * 20)
VAULT_C = Web3.to_checksum_address("0x" + "c3" * 20)

BASE_TIMESTAMP = 1_700_000_000


def tx_hash(n: int) -> str:
    """Deterministic 32-byte transaction hash."""
    return "0x" + f"{n:064x}"


class FakeNode:
    """
    Node stand-in exposing the LogFetcher interface.

    Set `failing` to one of "head", "factory", "vaults", "timestamps"
    to make that call raise SourceUnavailable.
    """

    def __init__(self, head: int = 0) -> None:
        self.head = head
        self.logs: list[RawLogEvent] = []
        self.failing: set[str] = set()
        self.calls: list[tuple] = []
        self._tx_counter = 0

    def _next_tx(self) -> str:
        self._tx_counter += 1
        return tx_hash(self._tx_counter)

    def add_goal(
        self,
        block: int,
        vault: str,
        name: str = "Trip",
        goal_id: int = 1,
        target_amount: int = 1_000_000,
        log_index: int = 0,
        tx: str | None = None,
    ) -> RawLogEvent:
        log = RawLogEvent(
            event=EventName.GOAL_CREATED,
            address=FACTORY,
            args={
                "goalId": goal_id,
                "owner": OWNER,
                "vault": vault,
                "name": name,
                "targetAmount": target_amount,
                "strategy": STRATEGY,
            },
            tx_hash=tx or self._next_tx(),
            log_index=log_index,
            block_number=block,
        )
        self.logs.append(log)
        return log

    def add_deposit(
        self,
        block: int,
        vault: str,
        amount: int,
        log_index: int = 1,
        tx: str | None = None,
    ) -> RawLogEvent:
        log = RawLogEvent(
            event=EventName.DEPOSITED,
            address=vault,
            args={
                "from": OWNER,
                "beneficiary": OWNER,
                "amount": amount,
                "sharesMinted": amount,
            },
            tx_hash=tx or self._next_tx(),
            log_index=log_index,
            block_number=block,
        )
        self.logs.append(log)
        return log

    def add_withdraw(
        self,
        block: int,
        vault: str,
        amount: int,
        log_index: int = 1,
        tx: str | None = None,
    ) -> RawLogEvent:
        log = RawLogEvent(
            event=EventName.WITHDRAWN,
            address=vault,
            args={"to": OWNER, "amount": amount, "sharesBurned": amount},
            tx_hash=tx or self._next_tx(),
            log_index=log_index,
            block_number=block,
        )
        self.logs.append(log)
        return log

    async def get_block_number(self) -> int:
        self.calls.append(("head",))
        if "head" in self.failing:
            raise SourceUnavailable("head unavailable")
        return self.head

    async def fetch(self, address, event_name, from_block, to_block):
        self.calls.append(("fetch", address, event_name, from_block, to_block))
        kind = "factory" if event_name == EventName.GOAL_CREATED else "vaults"
        if kind in self.failing:
            raise SourceUnavailable(f"{kind} unavailable")

        matching = [
            log for log in self.logs
            if log.address == Web3.to_checksum_address(address)
            and log.event == event_name
            and from_block <= log.block_number <= to_block
        ]
        return sorted(matching, key=lambda log: (log.block_number, log.log_index))

    async def fetch_many(self, addresses, event_names, from_block, to_block):
        names = list(event_names)
        result = []
        for address in addresses:
            for name in names:
                result.extend(await self.fetch(address, name, from_block, to_block))
        return result

    async def get_block_timestamps(self, block_numbers):
        numbers = set(block_numbers)
        self.calls.append(("timestamps", tuple(sorted(numbers))))
        if "timestamps" in self.failing:
            raise SourceUnavailable("timestamps unavailable")
        return {n: BASE_TIMESTAMP + n for n in numbers}

    def close(self) -> None:
        pass
