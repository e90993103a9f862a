"""
Kinetic Flux-Vector Splitting (KFVS)

Interface flux of the discrete-velocity BGK scheme. At each interface the
distribution is extrapolated from the upwind cell (u > 0 from the left,
u <= 0 from the right) and transported for one timestep with a second
order time correction:

    ff(u) = dt * u * f_face(u) - 0.5 * dt^2 * u^2 * sf_up(u)

Conserved fluxes are moments of ff, taken with the variant's moment
tensor psi. With zero slopes the scheme reduces to first-order upwind
transport, ff = dt * u * f_up.

Reference:
    Xu (2001), J. Comput. Phys. 171, 289-335 (KFVS and the BGK scheme)
    Mieussens (2000), Math. Models Methods Appl. Sci. 10, 1121-1149
"""

from numba import njit, prange


@njit
def interface_flux(fL, sfL, dxL, fR, sfR, dxR, u, psi, dt, fw, ff):
    """
    KFVS flux through one interface.

    Args:
        fL, sfL: Left cell distribution and slope, shape (n_f, nv)
        dxL: Left cell width
        fR, sfR: Right cell distribution and slope, shape (n_f, nv)
        dxR: Right cell width
        u: Field velocities, shape (n_f, nv)
        psi: Moment tensor, shape (n_w, n_f, nv)
        dt: Timestep
        fw: Output conserved flux, shape (n_w,)
        ff: Output distribution flux, shape (n_f, nv)
    """
    n_w = psi.shape[0]
    n_f = u.shape[0]
    nv = u.shape[1]

    for m in range(n_w):
        fw[m] = 0.0

    for j in range(n_f):
        for k in range(nv):
            uk = u[j, k]
            if uk > 0.0:
                f_face = fL[j, k] + 0.5 * dxL * sfL[j, k]
                slope = sfL[j, k]
            else:
                f_face = fR[j, k] - 0.5 * dxR * sfR[j, k]
                slope = sfR[j, k]

            flux = dt * uk * f_face - 0.5 * dt * dt * uk * uk * slope
            ff[j, k] = flux

            for m in range(n_w):
                fw[m] += psi[m, j, k] * flux


@njit(parallel=True)
def kfvs_flux(f, sf, dx, u, psi, dt, nxg, fw, ff):
    """
    KFVS fluxes through all interior interfaces.

    Args:
        f, sf: Distribution bundle and slopes, shape (n_cells, n_f, nv)
        dx: Cell widths, shape (n_cells,)
        u: Field velocities, shape (n_f, nv)
        psi: Moment tensor, shape (n_w, n_f, nv)
        dt: Timestep
        nxg: Ghost layers per side
        fw: Output, shape (n_faces, n_w)
        ff: Output, shape (n_faces, n_f, nv)

    Note:
        Face i lies between cells nxg-1+i and nxg+i; each face writes
        only its own rows of fw and ff.
    """
    n_faces = fw.shape[0]
    for i in prange(n_faces):
        left = nxg - 1 + i
        right = nxg + i
        interface_flux(f[left], sf[left], dx[left],
                       f[right], sf[right], dx[right],
                       u, psi, dt, fw[i], ff[i])


def evaluate_flux(field, faces, mesh, u, psi, dt):
    """
    Fill FaceFlux with the time-integrated KFVS fluxes of the current state.

    Args:
        field: FlowField (reconstructed)
        faces: FaceFlux (overwritten)
        mesh: PhysicalGrid
        u: Field velocities, shape (n_f, nv)
        psi: Moment tensor
        dt: Timestep
    """
    kfvs_flux(field.f, field.sf, mesh.dx, u, psi, dt, mesh.nxg, faces.fw, faces.ff)
