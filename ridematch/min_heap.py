"""
Indexed binary min-heap used as the Dijkstra frontier.

Each vertex appears at most once. A position index maps every vertex in the
heap to its array slot, which gives O(1) membership tests and lets
decrease_key find its entry without a scan.

Ordering uses a strict less-than on distance and nothing else: an entry only
moves past another when its distance is strictly smaller, so entries with
equal distances keep their current relative placement. This is the only tie
rule; callers needing reproducible order should rely on it rather than on
any secondary key.
"""

from typing import Dict, List, NamedTuple, Optional

from .logs import LogSink


class HeapEntry(NamedTuple):
    vertex: int
    distance: float


class IndexedMinHeap:
    def __init__(self, sink: Optional[LogSink] = None):
        self._heap: List[HeapEntry] = []
        self._positions: Dict[int, int] = {}
        self.sink = sink

    @staticmethod
    def _parent(i: int) -> int:
        return (i - 1) // 2

    def _log(self, message: str):
        if self.sink is not None:
            self.sink.record(message)

    def _swap(self, i: int, j: int):
        self._positions[self._heap[i].vertex] = j
        self._positions[self._heap[j].vertex] = i
        self._heap[i], self._heap[j] = self._heap[j], self._heap[i]

    def _sift_up(self, i: int):
        while i > 0:
            parent = self._parent(i)
            if not self._heap[i].distance < self._heap[parent].distance:
                break
            self._log(
                f"HeapifyUp: Swapping node {self._heap[i].vertex} (dist={self._heap[i].distance:.2f}) "
                f"with parent {self._heap[parent].vertex} (dist={self._heap[parent].distance:.2f})"
            )
            self._swap(i, parent)
            i = parent

    def _sift_down(self, i: int):
        size = len(self._heap)
        while True:
            smallest = i
            left = 2 * i + 1
            right = 2 * i + 2

            if left < size and self._heap[left].distance < self._heap[smallest].distance:
                smallest = left
            if right < size and self._heap[right].distance < self._heap[smallest].distance:
                smallest = right

            if smallest == i:
                return

            self._log(
                f"HeapifyDown: Swapping node {self._heap[i].vertex} (dist={self._heap[i].distance:.2f}) "
                f"with child {self._heap[smallest].vertex} (dist={self._heap[smallest].distance:.2f})"
            )
            self._swap(i, smallest)
            i = smallest

    def insert(self, vertex: int, distance: float):
        """Add a vertex that is not yet in the heap"""
        if vertex in self._positions:
            raise ValueError(f"Vertex {vertex} is already in the heap")

        self._log(f"Insert: Adding vertex {vertex} with distance {distance:.2f}")
        self._heap.append(HeapEntry(vertex, distance))
        index = len(self._heap) - 1
        self._positions[vertex] = index
        self._sift_up(index)

    def extract_min(self) -> HeapEntry:
        """Remove and return the entry with the smallest distance.

        Raises IndexError when the heap is empty, like list.pop and heapq.heappop.
        """
        if not self._heap:
            raise IndexError("extract_min from an empty heap")

        smallest = self._heap[0]
        self._log(f"ExtractMin: Removing vertex {smallest.vertex} with distance {smallest.distance:.2f}")

        last = self._heap.pop()
        del self._positions[smallest.vertex]

        if self._heap:
            self._heap[0] = last
            self._positions[last.vertex] = 0
            self._sift_down(0)

        return smallest

    def decrease_key(self, vertex: int, new_distance: float):
        """Lower a vertex's distance, inserting it if absent"""
        index = self._positions.get(vertex)
        if index is None:
            self.insert(vertex, new_distance)
            return

        old_distance = self._heap[index].distance
        if new_distance > old_distance:
            raise ValueError(
                f"decrease_key cannot raise vertex {vertex} from {old_distance} to {new_distance}"
            )

        self._log(f"DecreaseKey: Updating vertex {vertex} from distance {old_distance:.2f} to {new_distance:.2f}")
        self._heap[index] = HeapEntry(vertex, new_distance)
        self._sift_up(index)

    def peek(self) -> HeapEntry:
        if not self._heap:
            raise IndexError("peek at an empty heap")
        return self._heap[0]

    def distance_of(self, vertex: int) -> Optional[float]:
        index = self._positions.get(vertex)
        return None if index is None else self._heap[index].distance

    def contains(self, vertex: int) -> bool:
        return vertex in self._positions

    def size(self) -> int:
        return len(self._heap)

    def is_empty(self) -> bool:
        return not self._heap

    def __contains__(self, vertex: int) -> bool:
        return self.contains(vertex)

    def __len__(self) -> int:
        return len(self._heap)

    def entries(self) -> List[HeapEntry]:
        """Heap array in slot order"""
        return list(self._heap)

    def validate(self) -> bool:
        """Check heap order and that the position index mirrors the array"""
        if len(self._positions) != len(self._heap):
            return False
        for index, entry in enumerate(self._heap):
            if self._positions.get(entry.vertex) != index:
                return False
            if index > 0 and entry.distance < self._heap[self._parent(index)].distance:
                return False
        return True

    def __repr__(self):
        items = ", ".join(f"({e.vertex}:{e.distance:.2f})" for e in self._heap)
        return f"IndexedMinHeap([{items}])"
