# pivkit

Building blocks for particle image velocimetry (PIV): a gridded vector
field type, interrogation-grid generation from a mask, grey-scale image
loaders, a plain-text vector file format, a correlation engine base class,
a threaded batch runner and an XML session file.

## Vector fields

`pivkit.pivdata.PivData` holds the result of correlating one image pair.
Each grid node is a frozen `PivPointData` with position (`x`, `y`),
displacement (`u`, `v`), `snr`, `intensity` and the `valid` / `filtered`
flags.

```python
from pivkit.pivdata import PivData, PivPointData

field = PivData()
field.set_list([
    PivPointData(x=16, y=16, u=1.5, v=-0.5, snr=4.0, intensity=80.0),
    PivPointData(x=32, y=16, u=1.0, v=0.0, snr=3.0, intensity=75.0),
])

field.width, field.height   # (2, 1)
field.data(0, 1)            # row 0, column 1
field.num_valid()           # 2
field.max().u               # 1.5
```

`set_list` sorts the points into a regular grid by their unique `x` and
`y` values. Every node that has a matching point is marked valid; nodes
with no matching point are zeroed and invalid. Reading outside the grid
(`data`, `is_valid`, `filtered`) gives a zero point or `False` rather than
an error, and `set_data` / `set_filter` outside the grid are ignored.
`min()` and `max()` give per-field extremes over the grid (not
necessarily from the same node). `PivData(width, height)` creates a
zeroed grid of that size; `clear()` drops the grid and `is_empty()` tells
whether one is held.

`set_name` stores a file name with everything from its last `.` removed;
`index` is a plain attribute for the position of the data in a larger set.

## Writing and reading vector files

`pivkit.output.Output` writes one tab-separated text file per field: a
header line, then one line per grid node, row by row. `y` is written as
`image_height - y` and `v` with its sign flipped, so that (0, 0) lies in
the lower left of the image. Masked (invalid) nodes are written with zero
velocity, SNR and intensity.

```python
from pivkit.output import Output, OutputFormat
from pivkit.pivdata import PivData

writer = Output("results", 1024, OutputFormat.TEXT)
field.set_name("frames/run_0001.tif")
path = writer.write(field)        # "results/run_0001.txt"

again = PivData()
again.read(0, path, 1024)         # flips y and v back
```

`output_path(name)` gives the file a name would be written to, and
`format_point(point)` a single line. `output_current(field)` writes in the
configured format; with `OutputFormat.HDF5` it writes nothing and returns
`None`.

`pivkit.output_thread.OutputThread` is a thread that takes a given number
of items from a `queue.Queue`, hands each to a `write` callable, and calls
optional `on_file_written` and `on_done` callbacks. `stop()` ends it
before the next item.

## Interrogation grids

`pivkit.preprocess.generate_grid(width, height, mask_alpha)` returns the
`(x, y)` points spaced 16 pixels apart whose 32×32 neighbourhood holds no
non-zero alpha value. `mask_alpha` is a 2-D array indexed `[row, column]`;
without a mask every point is returned.

```python
import numpy as np
from pivkit.preprocess import generate_grid

alpha = np.zeros((256, 256), dtype=np.uint8)
alpha[:64, :64] = 255                 # opaque corner is left out
points = generate_grid(256, 256, alpha)
```

## Loading images

`pivkit.imageloader` keeps a registry of loaders ordered by ascending
`priority`; `find_loader(stream)` returns the first one whose
`can_load(stream)` is true, or `None`. Loaders return 2-D `float64`
arrays indexed `[row, column]` and raise `ImageLoaderError` on bad data.

- `TiffImageLoader` (priority 1) recognises streams starting with the
  BigTIFF headers `49 49 2b 00` or `4d 4d 00 2b`. One-band images are
  returned as they are (16-bit values kept), three-band images are
  converted to grey; its `can_load` raises `ImageLoaderError` on an empty
  or unreadable stream.
- `PillowImageLoader` (priority 2) accepts anything Pillow can open and
  converts it to grey through RGB.

```python
from pivkit.imageloader import find_loader

with open("frames/run_0001.png", "rb") as stream:
    loader = find_loader(stream)
    image = loader.load(stream)
```

More loaders can be added with `register_loader(loader)`, where `loader`
is an instance of an `ImageLoader` subclass.

## Correlation engine

`pivkit.engine.PivEngine(int_length_x, int_length_y, grid)` runs over a
list of `(x, y)` top-left window corners. Calling it with two images
returns a `PivData`: for each window it computes the mean grey value of
both images (`image_mean`), records the smaller one as `intensity`, and
asks `velocity` for the displacement.

The base engine has no correlation scheme: `cross_correlate` returns
`False`, so every displacement is zero. A subclass overrides
`cross_correlate(row, column)` to fill `self.cmap` (a
`2*int_length_y × 2*int_length_x` array) and return `True`, and
`estimate_displacement()` to turn `cmap` into a `PivPointData`.

```python
import numpy as np
from pivkit.engine import PivEngine

image_a = np.full((64, 64), 10.0)
image_b = np.full((64, 64), 20.0)
engine = PivEngine(32, 32, [(0, 0), (32, 0)])
result = engine(image_a, image_b)
result.data(0, 0).intensity       # 10.0
```

## Batch processing

`pivkit.batch.BatchProcessor(engine_factory, pairs, write, threads)`
processes `(name, image_a, image_b)` tuples on several threads, one engine
per thread, and hands each finished `PivData` (with its `index` and name
set) to `write` from a single output thread. `split_list` interleaves the
indices between threads so results come out roughly in order. `process()`
returns the number of results written; `stop()` ends the run early, and an
error raised while processing a pair is raised again from `process()`.

```python
from pivkit.batch import BatchProcessor
from pivkit.engine import PivEngine

pairs = [("frames/run_0001.tif", image_a, image_b)]
batch = BatchProcessor(lambda: PivEngine(32, 32, [(0, 0)]), pairs, writer.write, threads=4)
written = batch.process()
```

## Sessions

`pivkit.session.Session` holds an image root, a list of image files, a
vector root and a list of vector files. `write_session(path, session)`
stores it as an indented XML document and `read_session(path)` reads it
back, raising `ValueError` if the root element is not `Data`.

## Points

`pivkit.point.Point` is an immutable `x`, `y`, `z` point (all zero by
default); `convert(kind)` passes each coordinate through `kind`, for
example `Point(1.7, 2.2, 3.9).convert(int)`.

## What is not included

- No FFT cross-correlation or sub-pixel peak estimator: these are left to
  `PivEngine` subclasses.
- No vector filtering or validation beyond the `filtered` flag.
- No HDF5 output; `OutputFormat.HDF5` writes nothing.
- No graphical viewer and no command-line program; the package is used
  from Python.
- Sessions store file lists only, not processing settings.