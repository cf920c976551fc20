"""Environment identifiers, known contract addresses and asset identifiers."""

# Environments
TESTNET = "testnet"
BOMBAY = "bombay"
LOCAL = "local"

DEFAULT_ENVIRONMENT = TESTNET
ENVIRONMENT_VAR = "DEPLOY_NETWORK"

# Native denominations
UUSD = "uusd"
ULUNA = "uluna"

# CW20 symbols
MIR = "MIR"
ANC = "ANC"
MARS = "MARS"

# Astroport factory (also used as the oracle factory on the public testnets)
ASTROPORT_FACTORY = "terra18qpjm4zkvqnpjpw0zn0tdr8gdzvt8au35v45xf"

# CW20 token contracts, see https://github.com/terra-project/assets/blob/master/cw20/tokens.json
MIR_TOKEN = "terra10llyp6v3j3her8u3ce66ragytu45kcmd9asj3u"
ANC_TOKEN = "terra1747mad58h0w4y589y3sk84r5efqdev9q4r02pc"

# Bombay-only deployments
BOMBAY_MARS_TOKEN = "terra1qs7h830ud0a4hj72yr8f7jmlppyx7z524f7gw6"
BOMBAY_MINTER_PROXY = "terra1hfyg0tvuqd5kk4un4luqng2adc88lgt5skxmve"

# Block / time units
BLOCKS_PER_DAY = 11_520  # ~7.5s blocks
SECONDS_PER_DAY = 86_400
