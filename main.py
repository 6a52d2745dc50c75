import argparse
import logging
import sys

import grabcut_segmentation as seg

logger = logging.getLogger("grabcut_segmentation.main")


def perform_image_segmentation(image, rect, iterations, verbose=False):
	"""
	:param image: RGBA image that we want to segment
	:param rect: (x, y, w, h) rectangle drawn around the object
	:param iterations: number of model refinement rounds
	:return: mask with 255 on the object and 0 elsewhere
	"""
	return seg.segment(image, rect, iterations=iterations, verbose=verbose)


def parse_args(argv=None):
	p = argparse.ArgumentParser(description="Rectangle-seeded GrabCut segmentation")
	p.add_argument("input", nargs="?", help="input image path (omit with --gui to pick from --images-dir)")
	p.add_argument("--rect", nargs=4, type=int, metavar=("X", "Y", "W", "H"), help="seed rectangle around the object")
	p.add_argument("--iter", type=int, default=seg.MAX_ITERATIONS, help="refinement rounds, clamped to 1-5 [5]")
	p.add_argument("--output", help="where to write the mask (png)")
	p.add_argument("--show", action="store_true", help="plot the result with matplotlib")
	p.add_argument("--gui", action="store_true", help="draw the rectangle interactively")
	p.add_argument("--images-dir", default="images/", help="folder browsed by the GUI [images/]")
	p.add_argument("--verbose", action="store_true", help="show a progress bar")
	p.add_argument("--log-level", default="INFO", help="logging level [INFO]")
	return p.parse_args(argv)


def main(argv=None):
	args = parse_args(argv)
	logging.basicConfig(
		level=getattr(logging, args.log_level.upper(), logging.INFO),
		format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
	)

	if args.gui:
		from grabcut_segmentation.gui.gui import Gui

		gui = Gui(segmentation_function=lambda image, rect, n: perform_image_segmentation(image, rect, n, args.verbose),
				  iterations=seg.clamp_iterations(args.iter))
		gui.start(args.input, base_path=args.images_dir)
		return 0

	if args.input is None or args.rect is None:
		logger.error("An input image and --rect are required without --gui")
		return 2

	from grabcut_segmentation.image_processing.image_io import load_rgba, save_mask

	try:
		image = load_rgba(args.input)
		mask = perform_image_segmentation(image, tuple(args.rect), args.iter, args.verbose)
	except FileNotFoundError as e:
		logger.error(str(e))
		return 1
	except seg.InvalidInputError as e:
		logger.error("Rejected: %s", e.reason)
		return 2

	if args.output:
		save_mask(args.output, mask)
		logger.info("Mask saved to %s", args.output)

	if args.show:
		from grabcut_segmentation.image_processing.display import plot_segmentation

		plot_segmentation(image, mask, rect=tuple(args.rect))

	return 0


if __name__ == "__main__":
	sys.exit(main())
