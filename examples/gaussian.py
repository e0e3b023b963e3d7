import argparse
import numpy as np
from numpy import log

from pypolychord import run_polychord


def main(args):
    ndim = args.x_dim
    sigma = args.sigma
    centers = np.ones(ndim) * 0.5

    def loglike(theta, phi):
        like = -0.5 * (((theta - centers)/sigma)**2).sum() - 0.5 * log(2 * np.pi * sigma**2) * ndim
        # derived parameter: distance from the center
        return like, [((theta - centers)**2).sum()**0.5]

    def transform(cube):
        return cube

    run_polychord(loglike, transform, nDims=ndim, nDerived=1,
                  nlive=args.num_live_points, base_dir=args.log_dir,
                  file_root='gauss-%dd' % ndim, feedback=args.feedback)


if __name__ == '__main__':
    parser = argparse.ArgumentParser()

    parser.add_argument('--x_dim', type=int, default=2,
                        help="Dimensionality")
    parser.add_argument("--num_live_points", type=int, default=100)
    parser.add_argument('--sigma', type=float, default=0.01)
    parser.add_argument('--feedback', type=int, default=1)
    parser.add_argument('--log_dir', type=str, default='chains')

    args = parser.parse_args()
    main(args)
