import numpy as np


def calc_path_length_list(geometry_list):
    """Cumulative path length of a list of geometries."""
    path_length_list = [0.0]
    for i in range(len(geometry_list)-1):
        path_length = path_length_list[-1] + np.linalg.norm(np.asarray(geometry_list[i+1]) - np.asarray(geometry_list[i]))
        path_length_list.append(path_length)
    return path_length_list


def linear_interpolation(start_geometry, end_geometry, n_images):
    """Initial and final geometry with `n_images` linearly interpolated images in between."""
    start_geometry = np.array(start_geometry, dtype="float64")
    end_geometry = np.array(end_geometry, dtype="float64")
    if start_geometry.shape != end_geometry.shape:
        raise ValueError("Initial and final geometries must have the same shape.")
    geometry_list = []
    for t in np.linspace(0.0, 1.0, n_images + 2):
        geometry_list.append(start_geometry + (end_geometry - start_geometry) * t)
    return geometry_list


def distribute_geometry(geometry_list):
    """Distribute geometries evenly along the path"""
    nnode = len(geometry_list)
    path_length_list = calc_path_length_list(geometry_list)
    total_length = path_length_list[-1]
    
    if total_length < 1e-8:
        return list(geometry_list)

    node_dist = total_length / (nnode-1)
    
    new_geometry_list = [geometry_list[0]]
    for i in range(1, nnode-1):
        dist = i * node_dist
        for j in range(len(path_length_list)-1):
            if path_length_list[j] <= dist <= path_length_list[j+1]:
                segment = path_length_list[j+1] - path_length_list[j]
                delta_t = 0.0 if segment == 0.0 else (dist - path_length_list[j]) / segment
                new_geometry = geometry_list[j] + (geometry_list[j+1] - geometry_list[j]) * delta_t
                new_geometry_list.append(new_geometry)
                break
        else:
            # out of range due to numerical error
            new_geometry_list.append(geometry_list[-1])

    new_geometry_list.append(geometry_list[-1])
    return new_geometry_list
