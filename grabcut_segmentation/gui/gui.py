import sys
import os
import logging

import pygame
import numpy as np

from grabcut_segmentation.utils import *

logger = logging.getLogger(__name__)

RECT_WIDTH = 2
IMAGE_EXTENSIONS = ('.png', '.jpg', '.jpeg', '.bmp')


def surface_to_rgba(surface):
	"""
	:param surface: pygame surface
	:return: numpy array of shape (h, w, 4), RGBA
	"""
	rgb = pygame.surfarray.array3d(surface).swapaxes(0, 1)
	if surface.get_flags() & pygame.SRCALPHA:
		alpha = pygame.surfarray.array_alpha(surface).swapaxes(0, 1)
	else:
		alpha = np.full(rgb.shape[:2], 255, dtype=np.uint8)
	return np.ascontiguousarray(np.dstack([rgb, alpha]), dtype=np.uint8)


def normalize_rect(start, end, image_size):
	"""
	:return: (x, y, w, h) of the rectangle spanned by two corners, clipped to the image
	"""
	im_w, im_h = image_size
	x1, x2 = sorted((start[0], end[0]))
	y1, y2 = sorted((start[1], end[1]))
	x1, y1 = max(x1, 0), max(y1, 0)
	x2, y2 = min(x2, im_w), min(y2, im_h)
	return x1, y1, max(x2 - x1, 0), max(y2 - y1, 0)


class Gui:
	def __init__(self, segmentation_function, iterations=MAX_ITERATIONS):
		"""
		:param segmentation_function: callable (rgba_image, rect, iterations) -> mask of shape (h, w) with 0 / 255
		"""
		self.segmentation_function = segmentation_function
		self.iterations = iterations

		self.source_image = None
		self.results = None
		self.image_size = None

		self.resized_image = None
		self.resized_results = None

		self.screen = None
		self.screen_size = None
		self.font = None

		self.image_position = (0, 0)
		self.image_zoom = 1

		self.drag_start = None
		self.rect = None

	def image_coords(self, screen_pos):
		return (int((screen_pos[0] - self.image_position[0]) * self.image_zoom),
				int((screen_pos[1] - self.image_position[1]) * self.image_zoom))

	def update_screen(self, size_changed):
		im_w, im_h = self.image_size
		sc_w, sc_h = self.screen_size

		self.image_zoom = max(im_w / sc_w, im_h / sc_h)

		new_w = int(im_w / self.image_zoom)
		new_h = int(im_h / self.image_zoom)

		self.image_position = ((sc_w - new_w) // 2, (sc_h - new_h) // 2)

		if size_changed:
			self.resized_image = pygame.transform.scale(self.source_image, (new_w, new_h))
			self.resized_results = pygame.transform.scale(self.results, (new_w, new_h))

		self.screen.fill((0, 0, 0))
		self.screen.blit(self.resized_image, self.image_position)
		self.screen.blit(self.resized_results, self.image_position)

		if self.rect is not None:
			x, y, w, h = self.rect
			screen_rect = (self.image_position[0] + x / self.image_zoom,
						   self.image_position[1] + y / self.image_zoom,
						   w / self.image_zoom,
						   h / self.image_zoom)
			pygame.draw.rect(self.screen, RECT_RGBA, screen_rect, RECT_WIDTH)

		txt = "Iterations: {} (1-5)  Enter: segment  R: reset".format(self.iterations)
		self.screen.blit(self.font.render(txt, True, (255, 255, 255)), (10, 10))

	def run_segmentation(self):
		if self.rect is None or self.rect[2] == 0 or self.rect[3] == 0:
			logger.warning("Draw a rectangle around the object first")
			return

		np_image = surface_to_rgba(self.source_image)
		mask = self.segmentation_function(np_image, self.rect, self.iterations)

		# Foreground in blue, background in red, half transparent
		colors = np.where((mask == MASK_FOREGROUND)[:, :, np.newaxis], FOREGROUND, BACKGROUND)
		rgb_results = pygame.surfarray.pixels3d(self.results)
		alpha_results = pygame.surfarray.pixels_alpha(self.results)
		rgb_results[:, :, :] = colors.swapaxes(0, 1)
		alpha_results[:, :] = 128
		del rgb_results
		del alpha_results

	def reset(self):
		self.rect = None
		self.drag_start = None
		self.results = pygame.Surface(self.image_size, pygame.SRCALPHA)
		self.results.fill((0, 0, 0, 0))

	def start(self, file_name=None, base_path="images/"):
		# --- LOADING A SAVED FILE ---
		if file_name is not None and os.path.exists(file_name):
			base_path, file_name = os.path.split(file_name)
		elif file_name is None or not os.path.exists(os.path.join(base_path, file_name)):
			saved = sorted(f for f in os.listdir(base_path) if f.lower().endswith(IMAGE_EXTENSIONS))
			if len(saved) == 1:
				ans = 0
			else:
				while True:
					for i, s in enumerate(saved):
						print('- [' + str(i) + '] ' + s)
					ans = input("Choose an image: ")
					try:
						ans = int(ans)
						assert (0 <= ans < len(saved))
						break
					except (ValueError, AssertionError):
						pass

			file_name = saved[ans]

		# --- INITIALIZING PYGAME ---
		pygame.init()
		screen_info = pygame.display.Info()
		self.screen_size = (screen_info.current_w // 2, screen_info.current_h // 2)

		self.screen = pygame.display.set_mode(self.screen_size, pygame.RESIZABLE)
		clock = pygame.time.Clock()
		self.font = pygame.font.SysFont('consolas', 20, True)

		# --- LOADING ASSETS ---
		self.source_image = pygame.image.load(os.path.join(base_path, file_name))
		self.image_size = (self.source_image.get_width(), self.source_image.get_height())
		self.reset()

		size_changed = True

		# --- MAIN LOOP ---
		while 1:
			# --- EVENTS ---
			for event in pygame.event.get():
				if event.type == pygame.QUIT:
					pygame.quit()
					sys.exit()
				if event.type == pygame.KEYDOWN:
					if event.key in [pygame.K_KP_ENTER, pygame.K_RETURN]:
						self.run_segmentation()
						size_changed = True
					if event.key == pygame.K_r:
						self.reset()
						size_changed = True
					for n, key in enumerate([pygame.K_1, pygame.K_2, pygame.K_3, pygame.K_4, pygame.K_5], 1):
						if event.key == key:
							self.iterations = n

				if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
					self.drag_start = self.image_coords(event.pos)
				if event.type == pygame.MOUSEMOTION and self.drag_start is not None:
					self.rect = normalize_rect(self.drag_start, self.image_coords(event.pos), self.image_size)
				if event.type == pygame.MOUSEBUTTONUP and event.button == 1 and self.drag_start is not None:
					self.rect = normalize_rect(self.drag_start, self.image_coords(event.pos), self.image_size)
					self.drag_start = None

				if event.type == pygame.VIDEORESIZE:
					self.screen_size = (event.w, event.h)
					self.screen = pygame.display.set_mode(self.screen_size, pygame.RESIZABLE)
					size_changed = True

			# --- UPDATING SCREEN ---
			self.update_screen(size_changed)
			size_changed = False
			pygame.display.flip()
			clock.tick(120)
