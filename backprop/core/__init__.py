from backprop.core.autograd import (
    Node,
    Op,
    add,
    sub,
    mul,
    div,
    relu,
    run_gradient,
)
from backprop.core.graph import (
    NodeSnapshot,
    topological_order,
    zero_gradients,
    snapshot,
    to_dot,
    graph_stats,
)
from backprop.core.network import (
    DimensionMismatchError,
    Neuron,
    Layer,
    Network,
)
from backprop.core.train import (
    mse_loss,
    sgd_step,
    train,
)
