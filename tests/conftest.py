"""
Shared reference samples for the distribution tests.
"""

import numpy as np
import pytest


# White River near Nora, Indiana, annual peak flows (62 years)
# Rao, A.R., Hamed, K.H. (2000). Flood Frequency Analysis, table 7.1.2
WHITE_RIVER = np.array([
    23200, 2950, 10300, 23200, 4540, 9960, 10800, 26900, 23300, 20400,
    8480, 3150, 9380, 32400, 20800, 11100, 7270, 9600, 14600, 14300,
    22500, 14700, 12700, 9740, 3050, 8830, 12000, 30400, 27000, 15200,
    8040, 11700, 20300, 22700, 30400, 9180, 4870, 14700, 12800, 13700,
    7960, 9830, 12500, 10700, 13200, 14700, 14300, 4050, 14600, 14400,
    19200, 7160, 12100, 8650, 10600, 24500, 14400, 6300, 9560, 15800,
    14300, 28700,
])

# Annual maxima used for the L-moment reference values (31 years)
ANNUAL_MAXIMA_31 = np.array([
    1953, 1939, 1677, 1692, 2051, 2371, 2022, 1521, 1448, 1825,
    1363, 1760, 1672, 1603, 1244, 1521, 1783, 1560, 1357, 1673,
    1625, 1425, 1688, 1577, 1736, 1640, 1584, 1293, 1277, 1742,
    1491,
])

# White River at Mt. Carmel, peaks over a 50,000 cfs threshold (281 exceedances)
# Rao, A.R., Hamed, K.H. (2000). Flood Frequency Analysis, table 8.3.1
THRESHOLD_EXCEEDANCES = np.array([
    126000, 148000, 66000, 156000, 136000, 122000, 183000, 162000, 85200, 56800,
    56600, 138000, 81000, 51800, 90700, 139000, 160000, 118000, 50600, 137000,
    151000, 172000, 52600, 248000, 152000, 64500, 61500, 143000, 108000, 53000,
    134000, 115000, 84100, 105000, 85400, 76900, 99100, 73700, 122000, 62500,
    54300, 58000, 144000, 55800, 127000, 55800, 107000, 56400, 128000, 106000,
    110000, 232000, 60400, 60400, 50800, 100000, 55900, 167000, 53700, 56700,
    126000, 100000, 59500, 164000, 81800, 56400, 124000, 64600, 77300, 65900,
    72500, 65100, 80800, 69800, 53000, 195000, 128000, 114000, 110000, 149000,
    74100, 75900, 99300, 168000, 70800, 104000, 125000, 77300, 97300, 140000,
    54900, 66000, 199000, 99800, 105000, 93700, 277000, 85700, 77300, 122000,
    106000, 93300, 79000, 130000, 126000, 57800, 64700, 162000, 71900, 63500,
    81500, 51000, 84400, 108000, 185000, 55800, 94600, 82800, 146000, 66500,
    57700, 78700, 85100, 129000, 75700, 104000, 139000, 50600, 53500, 178000,
    110000, 50800, 76000, 130000, 67300, 149000, 78400, 96600, 83300, 68400,
    84300, 56400, 112000, 76400, 116000, 51400, 59800, 63900, 81900, 88200,
    62300, 162000, 67200, 85500, 51000, 286000, 73800, 61300, 60800, 91300,
    134000, 106000, 70800, 106000, 122000, 149000, 53700, 85300, 144000, 54800,
    116000, 67500, 56500, 86700, 91500, 105000, 134000, 97300, 84000, 141000,
    52600, 124000, 196000, 84200, 54500, 74500, 104000, 57200, 61000, 155000,
    96500, 89100, 77900, 70500, 73400, 180000, 83700, 302000, 133000, 92100,
    105000, 235000, 213000, 96100, 77100, 73900, 55400, 55200, 87800, 52600,
    106000, 93000, 147000, 61800, 101000, 154000, 52000, 121000, 86700, 57300,
    97500, 112000, 88500, 76200, 140000, 87400, 154000, 95100, 131000, 131000,
    54900, 78800, 101000, 224000, 54800, 50900, 63500, 63500, 152000, 51000,
    285000, 114000, 197000, 106000, 132000, 83700, 67200, 110000, 202000, 127000,
    90600, 126000, 73900, 86500, 181000, 141000, 79700, 97800, 57300, 77200,
    133000, 82900, 55000, 62000, 51700, 54500, 51600, 103000, 134000, 71700,
    57000, 63900, 60700, 81900, 171000, 111000, 50400, 50500, 69700, 88900,
    76600,
])


@pytest.fixture
def white_river():
    return WHITE_RIVER.copy()


@pytest.fixture
def annual_maxima_31():
    return ANNUAL_MAXIMA_31.copy()


@pytest.fixture
def threshold_exceedances():
    return THRESHOLD_EXCEEDANCES.copy()
