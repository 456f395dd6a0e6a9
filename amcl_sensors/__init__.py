# amcl_sensors
# Range-sensor observation models for Monte Carlo localization.

from .distance_field import DistanceField, FREE, UNKNOWN, OCCUPIED
from .occupancy_map import OccupancyMap
from .voxel_map import VoxelMap
from .sensor_data import PlanarData, PointCloudData
from .sample_set import SampleSet
from .params import (PlanarModelType, BeamModelParams, LikelihoodFieldParams,
                     LikelihoodFieldProbParams, LikelihoodFieldGompertzParams,
                     GompertzParams, MapFactors)
from .sensor import Sensor
from .planar_scanner import PlanarScanner
from .point_cloud_scanner import PointCloudScanner
from .config import TUNE, configure, scanner_from_params
