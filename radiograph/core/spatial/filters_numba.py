"""
Numba 이웃 연산 커널

컨볼루션 / 메디안 / 분산 필터의 픽셀 루프를 Numba JIT로 구현.
모든 커널은 edge-padding 된 입력(np.pad mode='edge')을 받아
[y0, y1) 행 밴드만 계산하므로, 호출부에서 밴드 사이마다
취소 여부를 확인할 수 있음.

패딩 규칙:
    padded[y + r, x + r] == src[clamp(y, 0, h-1), clamp(x, 0, w-1)]
    → clamp-to-edge 경계 정책과 정확히 동일
"""

import numpy as np
from numba import jit, prange


@jit(nopython=True, parallel=True, cache=True)
def convolve_band(padded, kernel, out, y0, y1):
    """
    RGB 가중합 (correlation 방향, 커널 뒤집지 않음)

    Args:
        padded: (h + 2r, w + 2r, 3) float64
        kernel: (k, k) float64
        out: (h, w, 3) float64, [y0, y1) 행에 결과 기록
    """
    k = kernel.shape[0]
    w = out.shape[1]

    for y in prange(y0, y1):
        for x in range(w):
            r = 0.0
            g = 0.0
            b = 0.0
            for ky in range(k):
                for kx in range(k):
                    wt = kernel[ky, kx]
                    r += padded[y + ky, x + kx, 0] * wt
                    g += padded[y + ky, x + kx, 1] * wt
                    b += padded[y + ky, x + kx, 2] * wt
            out[y, x, 0] = r
            out[y, x, 1] = g
            out[y, x, 2] = b


@jit(nopython=True, parallel=True, cache=True)
def median_band(padded, k, out, y0, y1):
    """채널별 k x k 이웃 중앙값 (k 홀수 → 가운데 원소)"""
    w = out.shape[1]
    n = k * k
    mid = n // 2

    for y in prange(y0, y1):
        values = np.empty(n, dtype=np.float64)
        for x in range(w):
            for c in range(3):
                idx = 0
                for ky in range(k):
                    for kx in range(k):
                        values[idx] = padded[y + ky, x + kx, c]
                        idx += 1
                values.sort()
                if n % 2 == 0:
                    out[y, x, c] = (values[mid - 1] + values[mid]) / 2.0
                else:
                    out[y, x, c] = values[mid]


@jit(nopython=True, parallel=True, cache=True)
def std_band(padded_gray, k, out, y0, y1):
    """
    k x k 이웃 회색값의 표준편차 (모집단, two-pass)

    Args:
        padded_gray: (h + 2r, w + 2r) float64, (R+G+B)/3
        out: (h, w) float64
    """
    w = out.shape[1]
    n = k * k

    for y in prange(y0, y1):
        for x in range(w):
            total = 0.0
            for ky in range(k):
                for kx in range(k):
                    total += padded_gray[y + ky, x + kx]
            mean = total / n

            acc = 0.0
            for ky in range(k):
                for kx in range(k):
                    d = padded_gray[y + ky, x + kx] - mean
                    acc += d * d
            out[y, x] = np.sqrt(acc / n)


def warmup_numba_filters():
    """Numba JIT 컴파일 워밍업"""
    dummy = np.random.rand(8, 8, 3) * 255
    padded = np.pad(dummy, ((1, 1), (1, 1), (0, 0)), mode='edge')
    kernel = np.full((3, 3), 1.0 / 9.0)
    out = np.empty_like(dummy)
    convolve_band(padded, kernel, out, 0, 8)
    median_band(padded, 3, out, 0, 8)

    gray = np.ascontiguousarray(padded.mean(axis=2))
    out_gray = np.empty((8, 8), dtype=np.float64)
    std_band(gray, 3, out_gray, 0, 8)
