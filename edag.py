from __future__ import annotations
import networkx as nx
import numpy as np
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional
from rational import Rational

# name -> numpy ufunc; log is base 10, ln is natural
FUNCTIONS: Dict[str, Callable[[np.ndarray], np.ndarray]] = {
	'sin': np.sin,
	'cos': np.cos,
	'tan': np.tan,
	'asin': np.arcsin,
	'acos': np.arccos,
	'atan': np.arctan,
	'sinh': np.sinh,
	'cosh': np.cosh,
	'tanh': np.tanh,
	'exp': np.exp,
	'ln': np.log,
	'log': np.log10,
	'sqrt': np.sqrt,
	'cbrt': np.cbrt,
	'abs': np.abs,
	'floor': np.floor,
	'ceil': np.ceil,
}

_BINARY: Dict[str, Callable[[np.ndarray, np.ndarray], np.ndarray]] = {
	'+': np.add,
	'-': np.subtract,
	'*': np.multiply,
	'/': np.divide,
	'^': np.power,
}

# printing precedences
_PREC = { 'NEG':4,'^':5,'*':3,'/':3,'+':2,'-':2 }

# Lightweight eDAG leveraging networkx.DiGraph; edges run child -> parent
@dataclass
class Node:
	type: str  # 'VAR','CONST','OP'
	symbol: str
	value: Any = None
	op: Optional[str] = None
	is_unary: bool = False
	children: List[str] = field(default_factory=list)  # ordered child node ids

class EDAG:
	def __init__(self) -> None:
		self.g = nx.DiGraph()
		self.root: Optional[str] = None
		self._id = 0
		self._order: Optional[List[str]] = None
	def _nid(self) -> str:
		self._id += 1
		return f"n{self._id}"
	def _add(self, node: Node) -> str:
		n = self._nid()
		self.g.add_node(n, data=node)
		for c in node.children:
			self.g.add_edge(c, n)
		self._order = None
		return n
	def add_const(self, v: Any, symbol: str = "") -> str:
		return self._add(Node('CONST', symbol or str(v), value=v))
	def add_var(self, name: str) -> str:
		return self._add(Node('VAR', name))
	def add_op(self, op: str, children: List[str], is_unary: bool=False) -> str:
		return self._add(Node('OP', op, op=op, is_unary=is_unary, children=list(children)))
	def node(self, nid: str) -> Node:
		return self.g.nodes[nid]['data']

	# -----------------
	# Structure queries
	# -----------------
	def op_nodes(self) -> Iterator[str]:
		for nid in self.order():
			if self.node(nid).type == 'OP':
				yield nid
	def var_nodes(self) -> Iterator[str]:
		for nid in self.order():
			if self.node(nid).type == 'VAR':
				yield nid
	def subtree(self, nid: str) -> set:
		return nx.ancestors(self.g, nid) | {nid}
	def enclosing_ops(self, nid: str) -> List[str]:
		"""Operators whose argument contains nid."""
		return [d for d in nx.descendants(self.g, nid) if self.node(d).type == 'OP']
	def depends_on_var(self, nid: str) -> bool:
		return any(self.node(s).type == 'VAR' for s in self.subtree(nid))
	def order(self) -> List[str]:
		if self._order is None:
			self._order = list(nx.topological_sort(self.g))
		return self._order

	# -----------------
	# Evaluation
	# -----------------
	def eval_array(self, env: Dict[str, Any]) -> np.ndarray:
		"""Evaluate over numpy arrays; undefined points come back as nan."""
		if self.root is None:
			raise RuntimeError('no expression parsed')
		arrays = {k: np.asarray(v, dtype=float) for k, v in env.items()}
		shape = np.broadcast(*arrays.values()).shape if arrays else ()
		values: Dict[str, np.ndarray] = {}
		with np.errstate(all='ignore'):
			for nid in self.order():
				data = self.node(nid)
				if data.type == 'CONST':
					values[nid] = np.full(shape, float(data.value))
				elif data.type == 'VAR':
					if data.symbol not in arrays:
						raise KeyError(f"Variable '{data.symbol}' not in env")
					values[nid] = np.broadcast_to(arrays[data.symbol], shape).astype(float)
				else:
					args = [values[c] for c in data.children]
					if data.is_unary and data.op == '-':
						out = np.negative(args[0])
					elif data.op in _BINARY:
						out = _BINARY[data.op](args[0], args[1])
					elif data.op in FUNCTIONS:
						out = FUNCTIONS[data.op](args[0])
					else:
						raise ValueError(f"Unknown op {data.op}")
					# division by zero, overflow and complex results are undefined
					values[nid] = np.where(np.isfinite(out), out, np.nan)
		return values[self.root]

	# -----------------
	# Stringification
	# -----------------
	def _node_to_string(self, nid: str) -> str:
		data = self.node(nid)
		if data.type == 'CONST':
			v = data.value
			if isinstance(v, Rational):
				return v.to_string()
			return data.symbol
		if data.type == 'VAR':
			return data.symbol
		def wrap(child: str, parent: str, is_right: bool=False) -> str:
			cd = self.node(child)
			s = self._node_to_string(child)
			if cd.type == 'CONST' and isinstance(cd.value, Rational) and cd.value < 0:
				return f"({s})"
			if cd.type != 'OP':
				return s
			cop = 'NEG' if (cd.is_unary and cd.op == '-') else cd.op
			cp, pp = _PREC.get(cop, 6), _PREC.get(parent, 6)
			need = cp < pp
			if cp == pp:
				# a - (b - c), a / (b * c), (a ^ b) ^ c
				need = (is_right and parent in ('-', '/')) or (parent == '^' and not is_right)
			return f"({s})" if need else s
		if data.is_unary and data.op == '-':
			return f"-{wrap(data.children[0], 'NEG')}"
		if data.op in ('+', '-'):
			return f"{wrap(data.children[0], data.op)} {data.op} {wrap(data.children[1], data.op, True)}"
		if data.op in ('*', '/', '^'):
			return f"{wrap(data.children[0], data.op)}{data.op}{wrap(data.children[1], data.op, True)}"
		args = ",".join(self._node_to_string(cid) for cid in data.children)
		return f"{data.op}({args})"
	def subexpression(self, nid: str) -> str:
		return self._node_to_string(nid)
	def to_string(self) -> str:
		if self.root is None:
			return ''
		return self._node_to_string(self.root)
	def __str__(self) -> str:
		return self.to_string()
