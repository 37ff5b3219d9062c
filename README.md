# raxkit

Building blocks for maximum-likelihood phylogenetic analyses. The package
has no dependencies beyond the standard library.

## Modules

- `raxkit.partition_assignment`: `PartitionRange`, `PartitionAssignment`
  (the site ranges given to one process, with running length and weight),
  `PartitionAssignmentStats` and `format_assignment_list`.
- `raxkit.load_balancer`: splits alignment partitions among processes.
  `SimpleLoadBalancer` cuts every partition into equal slices,
  `KassianLoadBalancer` balances site counts while splitting as few
  partitions as possible, and `BenoitLoadBalancer` balances total site
  weight. Asking for more processes than there are sites raises
  `LoadBalancerError`; a process id out of range in
  `get_proc_assignments` raises `IndexError`.
- `raxkit.coarse_load_balancer`: `SimpleCoarseLoadBalancer` hands job ids
  to workers in round-robin order.
- `raxkit.bootstop`: `BootstopCheckMRE`, the bootstopping test that
  repeatedly splits the recorded bootstrap trees into two random halves,
  builds a majority-rule extended consensus for each and compares them by
  weighted Robinson-Foulds distance. `compatible_splits` tests whether two
  bipartitions can be in one tree.
- `raxkit.binary_stream`: `BinaryStream` (fixed-size in-memory buffer,
  `IndexError` on overflow), `BinaryFileStream` (`EOFError` on a short
  read), `BinaryNullStream` (counts bytes only), and little-endian
  `write_*`/`read_*` helpers for 64-bit sizes, 32-bit unsigned integers,
  doubles, booleans, length-prefixed UTF-8 strings, sequences and
  mappings, plus `serialized_size` and `serialize`.
- `raxkit.log`: `logger()` returns the shared `Logging` object with a
  `LogLevel` filter, extra output streams, an optional log file and
  per-`LogElement` number precision; `format_timestamp` and
  `format_progress` format elapsed time and progress lines.
- `raxkit.types`: shared enumerations, numerical defaults and the base
  error `RaxmlError`.

## Examples

Distributing partitions over processes:

```python
from raxkit.partition_assignment import PartitionAssignment, PartitionAssignmentStats
from raxkit.load_balancer import KassianLoadBalancer

part_sizes = PartitionAssignment()
part_sizes.assign_sites(0, 0, 159, 16)   # part id, offset, length, per-site weight
part_sizes.assign_sites(1, 0, 124, 16)

bins = KassianLoadBalancer().get_all_assignments(part_sizes, 4)
print(PartitionAssignmentStats(bins))
```

Checking bootstrap convergence. Each split is given either as an integer
bit mask over the tips or as an iterable of tip indices:

```python
from raxkit.bootstop import BootstopCheckMRE

check = BootstopCheckMRE(max_bs_trees=1000, cutoff=0.03, num_permutations=1000)
for splits in replicate_splits:
    check.add_bootstrap_tree(splits, num_tips)
if check.converged(random_seed=42):
    print("converged:", check.avg_wrf(), check.avg_pct())
```

Serializing values to a binary buffer:

```python
from raxkit.binary_stream import BinaryStream, write_string, read_string

bs = BinaryStream(64)
write_string(bs, "taxon1")
bs.reset()
assert read_string(bs) == "taxon1"
```

Logging:

```python
import sys
from raxkit.log import logger, LogLevel, LogElement

log = logger()
log.add_log_stream(sys.stdout)
log.set_precision(3, LogElement.loglh)
log.logstream(LogLevel.info).write("log-likelihood: ", -1234.5678, "\n")
```

## What the package does not do

There is no command-line program. The package does not read trees or
alignment files: bootstop checks take splits that the caller has already
extracted from each tree, and the load balancers take partition sizes
that the caller supplies. No tree search or likelihood computation is
included.

## Running the tests

```
pip install .[test]
pytest
```