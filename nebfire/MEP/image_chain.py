import numpy as np

from nebfire.errors import ConfigurationError, IndexOutOfRangeError, ShapeMismatchError
from nebfire.Utils.calc_tools import as_field, field_norm
from nebfire.Utils.lookup import DefaultLookup

DEFAULT_SPRING_CONSTANT = 10.0
DEFAULT_CLIMBING = 5
# approximate infinite number, the climbing image is never switched on
NO_CLIMBING = 1000000000000


class Image:
    """One configuration of the band: coordinates R, forces F and energy E."""

    def __init__(self, R, F=None, E=None):
        self.R = as_field(R)
        self.F = None if F is None else as_field(F)
        self.E = None if E is None else float(E)

    def set(self, R=None, F=None, E=None):
        if R is not None:
            self.R = as_field(R)
        if F is not None:
            self.F = as_field(F)
        if E is not None:
            self.E = float(E)
        return self

    @property
    def n_atoms(self):
        return len(self.R)

    def __repr__(self):
        return f"Image(n_atoms={self.n_atoms}, E={self.E})"


class ImageChain:
    """Ordered images of a band: initial, interior images and final.

    Parameters
    ----------
    images : sequence of Image or array_like
        All images, starting with the initial and ending with the final one.
    k : float, dict or list, optional
        Spring constant(s); a dict maps image indices to constants, a list
        gives one constant per interior image (first entry for image 1).
        Unset images use the default (10).
    climbing : int or bool, optional
        Number of iterations after which the climbing image is considered,
        False disables climbing, True uses the default (5).
    climbing_tol : float, optional
        Energy tolerance for an image to be climbing (default 0.005).
    """

    def __init__(self, images, k=DEFAULT_SPRING_CONSTANT, climbing=DEFAULT_CLIMBING, climbing_tol=0.005):
        images = [image if isinstance(image, Image) else Image(image) for image in images]
        if len(images) < 2:
            raise ConfigurationError("NEB: at least the initial and final image are required")

        size_img = images[0].n_atoms
        for num, image in enumerate(images):
            if image.n_atoms != size_img:
                raise ShapeMismatchError(
                    f"NEB: image {num} has {image.n_atoms} atoms, expected {size_img}")

        self.images = images
        # number of images without the initial and final
        self.n_images = len(images) - 2

        if climbing is False:
            self.climbing = NO_CLIMBING
        elif climbing is True:
            self.climbing = DEFAULT_CLIMBING
        else:
            self.climbing = climbing
        self.climbing_tol = climbing_tol

        # a sequence holds one constant per interior image, starting at image 1
        self.k = DefaultLookup.from_value(k, DEFAULT_SPRING_CONSTANT, start=1)
        self.niter = 0

    @property
    def initial(self):
        return self.images[0]

    @property
    def final(self):
        return self.images[-1]

    def __len__(self):
        return len(self.images)

    def __getitem__(self, image):
        self.check_index(image, include_boundary=True)
        return self.images[image]

    def __iter__(self):
        return iter(self.images)

    def check_index(self, image, include_boundary=False):
        if include_boundary:
            if image < 0 or self.n_images + 1 < image:
                raise IndexOutOfRangeError(
                    f"NEB: requesting a non-existing image {image} (valid 0..{self.n_images + 1})")
        else:
            if image < 1 or self.n_images < image:
                raise IndexOutOfRangeError(
                    f"NEB: requesting a non-existing image {image} (valid 1..{self.n_images})")

    def displacement(self, img1, img2):
        """Return `R[img2] - R[img1]`."""
        self.check_index(img1, include_boundary=True)
        self.check_index(img2, include_boundary=True)
        return self.images[img2].R - self.images[img1].R

    def increment_iteration(self):
        self.niter += 1
        return self.niter

    def energies(self):
        return np.array([image.E for image in self.images], dtype="float64")

    def reaction_coordinates(self):
        """Accumulated path length from the initial image."""
        coordinates = [0.0]
        for i in range(1, len(self.images)):
            coordinates.append(coordinates[-1] + field_norm(self.displacement(i - 1, i)))
        return np.array(coordinates)

    def spring_constants(self):
        return np.array([self.k[i] for i in range(1, self.n_images + 1)], dtype="float64")
