from .auth import auth_ns
from .chat import chat_ns
from .layanan import layanan_ns
from .mitra import mitra_ns
from .notifikasi import notifikasi_ns
from .pengaturan import pengaturan_ns
from .pengguna import pengguna_ns
from .saldo import saldo_ns
from .sistem import dashboard_ns, health_ns
from .statistik import statistik_ns
from .tagihan import tagihan_ns
from .topup import topup_ns
from .transaksi import transaksi_ns

# Urutan mengikuti menu dashboard
NAMESPACES = [
    health_ns,
    auth_ns,
    dashboard_ns,
    mitra_ns,
    topup_ns,
    saldo_ns,
    chat_ns,
    tagihan_ns,
    layanan_ns,
    transaksi_ns,
    pengguna_ns,
    statistik_ns,
    notifikasi_ns,
    pengaturan_ns,
]
