from __future__ import annotations

from dataclasses import dataclass

from suidex.domain.entities.pool import Dex


@dataclass(frozen=True)
class KnownPool:
    id: str
    name: str


CETUS_POOL_TYPE = "0x1eabed72c53feb3805120a081dc15963c204dc8d091542592abaf7a35689b2fb::pool::Pool"
BLUEFIN_POOL_TYPE = "0x3492c874c1e3b3e2984e8c41b589e642d4d0a5d6459e5a9cfc2d52fd7c89c267::pool::Pool"
FULLSAIL_POOL_TYPE = "0xe74104c66dd9f16b3096db2cc00300e556aa92edc871be4bc052b5dfb80db239::pool::Pool"

POOL_TYPES: dict[str, str] = {
    Dex.CETUS.value: CETUS_POOL_TYPE,
    Dex.BLUEFIN.value: BLUEFIN_POOL_TYPE,
    Dex.FULL_SAIL.value: FULLSAIL_POOL_TYPE,
}

CETUS_POOLS = (
    KnownPool("0xcf994611fd4c48e277ce3ffd4d4364c914af2c3cbb05f7bf6facd371de688630", "SUI/USDC"),
    KnownPool("0x2e041f3fd93646dcc877f783c1f2b7fa62d30271bdef1f21ef002cebf857bded", "SUI/USDT"),
    KnownPool("0x0254747f5ca059a1972cd7f6016485d51392a3fde608107b93bbaebea550f703", "SUI/WETH"),
    KnownPool("0x5b0b24c27ccf6d0e98f3a8704d2e577de83fa574d3a9f324a1b63f1f5f1f6d30", "DEEP/SUI"),
)

BLUEFIN_POOLS = (
    KnownPool("0x3b585786b13af1d8ea067ab37101b6513a05d2f90cfe60e8b1d9e1b46a63c4fa", "SUI/USDC"),
    KnownPool("0x0321b68a0fca8c990710d26986ba433e06b495f0e8c91c40fc3bd5bf1d2b2894", "WETH/USDC"),
)

FULLSAIL_POOLS = (
    KnownPool("0xa7aa7807a87a771206571d3dd40e53ccbc395d7024def57b49ed9200b5b7e4e5", "IKA/SUI"),
    KnownPool("0x7fc2f2f3807c6e19f0d418d1aaad89e6f0e866b5e4ea10b295ca0b686b6c4980", "SUI/USDC"),
    KnownPool("0xb41cf6d7b9dfdf21279571a1128292b56b70ad5e0106243db102a8e4aea842c7", "USDT/USDC"),
    KnownPool("0x195fa451874754e5f14f88040756d4897a5fe4b872dffc4e451d80376fa7c858", "WBTC/USDC"),
    KnownPool("0x90ad474a2b0e4512e953dbe9805eb233ffe5659b93b4bb71ce56bd4110b38c91", "ETH/USDC"),
    KnownPool("0x20e2f4d32c633be7eac9cba3b2d18b8ae188c0b639f3028915afe2af7ed7c89f", "WAL/SUI"),
    KnownPool("0xd0dd3d7ae05c22c80e1e16639fb0d4334372a8a45a8f01c85dac662cc8850b60", "DEEP/SUI"),
    KnownPool("0x17bac48cb12d565e5f5fdf37da71705de2bf84045fac5630c6d00138387bf46a", "ALKIMI/SUI"),
    KnownPool("0x038eca6cc3ba17b84829ea28abac7238238364e0787ad714ac35c1140561a6b9", "SAIL/USDC"),
    KnownPool("0xe676d09899c8a4f4ecd3e4b9adac181f3f2e1e439db19454cacce1b4ea5b40f4", "USDZ/USDC"),
)

KNOWN_POOLS: dict[str, tuple[KnownPool, ...]] = {
    Dex.CETUS.value: CETUS_POOLS,
    Dex.BLUEFIN.value: BLUEFIN_POOLS,
    Dex.FULL_SAIL.value: FULLSAIL_POOLS,
}
