from pyexachem.cholesky.cd_svd import (
    cholesky_2e,
    cd_svd_driver,
    cd_2e_driver,
    get_cholesky_tensors,
)
