import logging
from collections import deque
from typing import List

import numpy as np

logger = logging.getLogger(__name__)


class FlowGraph:
	"""
	Directed graph with integer capacities, solved with Dinic's algorithm.
	Every edge is stored next to its reverse edge: edge i and edge i ^ 1 form a pair,
	and capacities always hold the residual capacity.
	"""
	def __init__(self, nb_nodes):
		self.nb_nodes = nb_nodes
		self.edge_target: List[int] = []
		self.edge_capacity: List[int] = []
		self.starting_edges: List[List[int]] = [[] for _ in range(nb_nodes)]

		self.level: List[int] = [-1] * nb_nodes
		self.current_arc: List[int] = [0] * nb_nodes

	def __len__(self):
		return self.nb_nodes

	@property
	def nb_edges(self):
		return len(self.edge_target)

	def add_edge(self, initial_vertex, terminal_vertex, capacity) -> int:
		"""
		:param initial_vertex: tail of the edge
		:param terminal_vertex: head of the edge
		:param capacity: non-negative integer capacity
		:return: index of the forward edge, its reverse edge has index + 1
		"""
		if capacity < 0:
			raise ValueError("capacity must be non-negative, got {}".format(capacity))

		edge_index = len(self.edge_target)

		# Forward edge
		self.edge_target.append(terminal_vertex)
		self.edge_capacity.append(int(capacity))
		self.starting_edges[initial_vertex].append(edge_index)

		# Reverse edge, starts empty
		self.edge_target.append(initial_vertex)
		self.edge_capacity.append(0)
		self.starting_edges[terminal_vertex].append(edge_index + 1)

		return edge_index

	def residual_capacity(self, edge_index) -> int:
		return self.edge_capacity[edge_index]

	def bfs_levels(self, source, sink) -> bool:
		"""
		Phase 1: layering the residual graph by distance from the source
		:return: True if the sink can still be reached
		"""
		level = self.level
		for i in range(self.nb_nodes):
			level[i] = -1
		level[source] = 0

		queue = deque([source])
		while queue:
			node = queue.popleft()
			for edge_index in self.starting_edges[node]:
				tv = self.edge_target[edge_index]
				if self.edge_capacity[edge_index] > 0 and level[tv] < 0:
					level[tv] = level[node] + 1
					if tv == sink:
						return True
					queue.append(tv)

		return level[sink] != -1

	def blocking_flow(self, source, sink) -> int:
		"""
		Phase 2: pushing flow along level-increasing paths until none is left.
		The search walks an explicit path instead of recursing, so path length is not bounded by the stack.
		:return: flow pushed during this phase
		"""
		level = self.level
		current_arc = self.current_arc
		edge_target = self.edge_target
		edge_capacity = self.edge_capacity

		for i in range(self.nb_nodes):
			current_arc[i] = 0

		pushed = 0
		path: List[int] = []
		node = source
		while True:
			if node == sink:
				bottle_neck_cap = min(edge_capacity[e] for e in path)
				for e in path:
					edge_capacity[e] -= bottle_neck_cap
					edge_capacity[e ^ 1] += bottle_neck_cap
				pushed += bottle_neck_cap

				# Restart from the source, saturated arcs get skipped through current_arc
				path = []
				node = source
				continue

			edges = self.starting_edges[node]
			advanced = False
			while current_arc[node] < len(edges):
				edge_index = edges[current_arc[node]]
				tv = edge_target[edge_index]
				if edge_capacity[edge_index] > 0 and level[node] < level[tv]:
					path.append(edge_index)
					node = tv
					advanced = True
					break
				current_arc[node] += 1

			if advanced:
				continue

			# Dead end
			if node == source:
				return pushed
			edge_index = path.pop()
			node = edge_target[edge_index ^ 1]
			current_arc[node] += 1

	def max_flow(self, source, sink) -> int:
		"""
		Runs phases until the sink is unreachable. The levels of the last phase describe the minimum cut.
		:return: value of the maximum flow
		"""
		if source == sink:
			raise ValueError("source and sink must be different nodes")

		flow = 0
		phases = 0
		while self.bfs_levels(source, sink):
			flow += self.blocking_flow(source, sink)
			phases += 1

		logger.debug("Max-flow: %d after %d phases on %d nodes, %d edges", flow, phases, self.nb_nodes, self.nb_edges)
		return flow

	def min_cut_source_side(self) -> np.ndarray:
		"""
		Only meaningful after max_flow
		:return: boolean array, True for every node still reachable from the source in the residual graph
		"""
		return np.array(self.level) >= 0
